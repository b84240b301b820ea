from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config.database import create_tables
from shared.observability import setup_observability
from shared.security import limiter

# IMPORTANT: import models so they register with Base
from services.auth_service import models as auth_models  # noqa: F401
from services.product_service import models as product_models  # noqa: F401
from services.cart_service import models as cart_models  # noqa: F401
from services.order_service import models as order_models  # noqa: F401

from services.auth_service.router import router as auth_router
from services.product_service.router import router as product_router, public_router as product_public_router
from services.cart_service.router import router as cart_router
from services.order_service.router import router as order_router

app = FastAPI(
    title="Shop Checkout API",
    description="Order placement and checkout: cash-on-delivery and Razorpay online payments.",
    version="1.0.0",
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, "checkout_service")

# --- SECURITY SETUP ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(auth_router)
app.include_router(product_router)
app.include_router(product_public_router)
app.include_router(cart_router)
app.include_router(order_router)


@app.on_event("startup")
async def startup_event():
    # Creates the per-service schemas (PostgreSQL) and all tables
    await create_tables()


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

"""
Cart Experience API - Main FastAPI Application

Single entry point for the cart routes and health check. The context
store, service and reaper are created per application so tests can
build isolated apps with a fake clock.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends

from experience.cart import CartContextStore, CartService, ContextReaper
from experience.clock import Clock, SystemClock
from experience.config import Settings, get_settings
from experience.logging import get_logger
from experience.routers import cart_router, register_error_handlers
from experience.routers.deps import get_cart_store

logger = get_logger(__name__)


def create_app(
    clock: Optional[Clock] = None,
    settings: Optional[Settings] = None,
    store: Optional[CartContextStore] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        clock: time source for expiry (system clock by default)
        settings: service settings (loaded from environment by default)
        store: pre-built context store, mainly for tests
    """
    settings = settings or get_settings()
    clock = clock or SystemClock()
    store = store or CartContextStore(
        clock=clock,
        ttl=settings.ttl,
        max_items=settings.max_items_in_cart,
        tax_rate=settings.tax_rate,
    )
    reaper = ContextReaper(store, interval=settings.cleanup_interval)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler"""
        # Startup
        reaper.start()
        yield
        # Shutdown
        await reaper.stop()

    app = FastAPI(
        title="Cart Experience API",
        description="Ephemeral shopping carts in front of the commerce back end",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.clock = clock
    app.state.cart_service = CartService(store, default_currency=settings.default_currency)
    app.state.reaper = reaper

    register_error_handlers(app)
    app.include_router(cart_router)

    # ==================== HEALTH CHECK ====================

    @app.get("/health")
    async def health_check(store: CartContextStore = Depends(get_cart_store)):
        """Health check endpoint"""
        return {
            "status": "ok",
            "timestamp": store.clock.now().isoformat(),
            "activeContexts": len(store),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = get_settings().port
    logger.info(f"Cart experience API listening on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)

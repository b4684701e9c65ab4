from fastapi import FastAPI
from .routes.orders import router as orders_router
from .utils.logging import logger

app = FastAPI(
    title="codrisk",
    description="COD order risk scoring for the admin dashboard",
    version="0.1.0",
)

app.include_router(orders_router)

logger.info("codrisk api loaded")

@app.get("/health")
def health():
    return {"ok": True}

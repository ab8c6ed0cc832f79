from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.routers.link import router as link_router
from src.routers.live import router as live_router
from src.routers.scam_detection import router as scam_detection_router
from src.routers.screenshot import router as screenshot_router
from src.services.phrase_classifier import init_classifier


@asynccontextmanager
async def lifespan(app: FastAPI):
    # a bad PHRASE_DICTIONARY_PATH stops the server here, not on the first request
    init_classifier()
    yield


app = FastAPI(title="Phonon API", lifespan=lifespan)

app.include_router(live_router)
app.include_router(scam_detection_router)
app.include_router(link_router)
app.include_router(screenshot_router)


@app.get("/")
def root():
    return {"message": "API is running!"}

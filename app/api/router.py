from fastapi import APIRouter

from app.api.routes import cards, games, jobs, players

api_router = APIRouter()
api_router.include_router(games.router)
api_router.include_router(cards.router)
api_router.include_router(players.router)
api_router.include_router(jobs.router)

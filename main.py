"""Run the journal recommender API with uvicorn (auto-reload in debug mode)."""
import uvicorn

from recommender.config import settings

if __name__ == "__main__":
    db_target = settings.db.url.split("@")[-1] if "@" in settings.db.url else settings.db.url
    print(f"Starting {settings.app_name} v{settings.version} ({settings.environment.value})")
    print(f"Listening on http://{settings.host}:{settings.port}{settings.api_prefix}")
    print(f"Database: {db_target}")
    print(f"LLM model: {settings.llm.model}")
    print(f"Auto-reload: {'Enabled' if settings.debug else 'Disabled'}")
    print("-" * 50)

    uvicorn.run(
        "recommender.api:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        reload_dirs=["recommender", "llm", "config"] if settings.debug else None,
        log_level=settings.logging.level.lower(),
    )

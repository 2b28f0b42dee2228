import uvicorn

from server.api.settings import Settings


def main():
    settings = Settings.from_env()

    uvicorn.run(
        "server.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

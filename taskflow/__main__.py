"""CLI -- python -m taskflow <command>

  serve     запустить API (uvicorn)
  init-db   создать таблицы
  seed      заполнить базу демо-данными
"""

import argparse

import uvicorn

from .config import load_settings
from .db import init_db
from .logging_config import setup_logging
from .seed import seed_demo


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="taskflow")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="запустить API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")

    sub.add_parser("init-db", help="создать таблицы")

    seed = sub.add_parser("seed", help="демо-данные")
    seed.add_argument("--users", type=int, default=10)

    args = parser.parse_args(argv)
    settings = load_settings()

    if args.command == "serve":
        uvicorn.run(
            "taskflow.main:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            reload=args.reload,
        )
        return

    setup_logging(settings)
    if args.command == "init-db":
        init_db(settings.db_path)
        print(f"База данных готова: {settings.db_path}")
    elif args.command == "seed":
        created = seed_demo(settings.db_path, users=args.users)
        print(f"Создано пользователей: {created} (пароль: password)")


if __name__ == "__main__":
    main()

# API de Pedidos
import os
import logging
from pathlib import Path
from urllib.parse import urlparse, ParseResult, urlunparse, quote_plus

from flask import Flask
from werkzeug.exceptions import HTTPException

from modelos import db
from repositorio import RepositorioSQLAlchemy
from rotas import EXTENSAO_REPOSITORIO, bp, http_error

# =====================================================
# CONFIGURACAO DE PASTAS E BANCO
# =====================================================
ROOT_DIR = Path(__file__).resolve().parent

logger = logging.getLogger("pedidos_app")


def _normalize_db_url(url: str | None) -> str | None:
    if not url:
        return None
    # Aceita postgres:// e transforma em postgresql:// para compatibilidade
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _build_postgres_url_from_parts() -> str | None:
    user = os.environ.get("POSTGRES_USER") or os.environ.get("PGUSER")
    password = os.environ.get("POSTGRES_PASSWORD") or os.environ.get("PGPASSWORD")
    db_name = os.environ.get("POSTGRES_DB") or os.environ.get("PGDATABASE")
    host = os.environ.get("POSTGRES_HOST") or os.environ.get("PGHOST")
    port = os.environ.get("POSTGRES_PORT") or os.environ.get("PGPORT")
    sslmode = os.environ.get("POSTGRES_SSLMODE") or os.environ.get("PGSSLMODE")
    if not (user and password and db_name and host):
        return None

    netloc = f"{quote_plus(user)}:{quote_plus(password)}@{host}"
    if port:
        netloc = f"{netloc}:{port}"
    query = f"sslmode={sslmode}" if sslmode else ""
    parsed = ParseResult(
        scheme="postgresql", netloc=netloc, path=f"/{db_name}", params="", query=query, fragment=""
    )
    return urlunparse(parsed)


def _storage_root() -> Path:
    root = Path(
        os.environ.get("PEDIDOS_STORAGE_DIR")
        or os.environ.get("PEDIDOS_BASE_DIR")
        or ROOT_DIR
    ).expanduser()
    root.mkdir(parents=True, exist_ok=True)
    return root


def _default_sqlite_path() -> Path:
    db_path = Path(
        os.environ.get("PEDIDOS_DB_PATH") or (_storage_root() / "pedidos.db")
    ).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return db_path


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def resolve_database_uri() -> str:
    env_url = (
        os.environ.get("DATABASE_URL")
        or os.environ.get("RENDER_DATABASE_URL")
        or os.environ.get("POSTGRES_URL")
    )
    db_url = _normalize_db_url(env_url)

    if _is_truthy(os.environ.get("PEDIDOS_FORCE_SQLITE")):
        db_url = None
    elif not db_url:
        db_url = _build_postgres_url_from_parts()

    if not db_url:
        return f"sqlite:///{_default_sqlite_path()}"
    return db_url


def engine_options(database_uri: str) -> dict:
    # Se for PostgreSQL e não tiver sslmode na query, passa connect_args sslmode=require
    parsed = urlparse(database_uri)
    scheme = parsed.scheme or ""
    if scheme.startswith("postgres") and "sslmode=" not in (parsed.query or ""):
        return {"connect_args": {"sslmode": "require"}}
    return {}


# =====================================================
# APP / LOGGING / DB
# =====================================================
def create_app(config: dict | None = None, repositorio=None) -> Flask:
    logging.basicConfig(level=os.environ.get("PEDIDOS_LOG_LEVEL", "INFO").upper())

    app = Flask(__name__)
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    if not config or "SQLALCHEMY_DATABASE_URI" not in config:
        app.config["SQLALCHEMY_DATABASE_URI"] = resolve_database_uri()
    if config:
        app.config.update(config)
    app.config.setdefault(
        "SQLALCHEMY_ENGINE_OPTIONS", engine_options(app.config["SQLALCHEMY_DATABASE_URI"])
    )
    app.json.ensure_ascii = False

    db.init_app(app)
    app.extensions[EXTENSAO_REPOSITORIO] = repositorio or RepositorioSQLAlchemy(db.session)

    app.register_blueprint(bp)
    app.register_error_handler(HTTPException, http_error)

    _initialize_app(app)
    return app


# =====================================================
# INIT
# =====================================================
def _initialize_app(app: Flask):
    with app.app_context():
        # cria as tabelas automaticamente no banco
        db.create_all()
    backend = urlparse(app.config["SQLALCHEMY_DATABASE_URI"]).scheme
    logger.info("Banco de dados inicializado (%s)", backend)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    debug = _is_truthy(os.environ.get("FLASK_DEBUG"))
    create_app().run(host="0.0.0.0", port=port, debug=debug)

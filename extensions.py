from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from sqlalchemy import MetaData

# Расширения без привязки к конкретному приложению (init_app в create_app)

# Имена ограничений одинаковые на SQLite и PostgreSQL
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# База данных
db = SQLAlchemy(metadata=MetaData(naming_convention=NAMING_CONVENTION))

# Сессии и текущий пользователь
login_manager = LoginManager()

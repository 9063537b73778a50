from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Note: models register themselves on import; app.db.models imports all of them
# so Base.metadata is complete for create_all() and Alembic autogenerate

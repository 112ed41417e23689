from app.db.session import engine
from app.db.base import Base
import app.models  # noqa: F401  register all models with Base

print("Creating database tables...")
Base.metadata.create_all(bind=engine)
print("✅ All tables created successfully!")

"""Flag past vaccination drives as expired without waiting for the scheduler."""
from app.core.database import SessionLocal
from app.services.drive import DriveService

db = SessionLocal()
try:
    count = DriveService(db).expire_past_drives()
    db.commit()
    print(f"Marked {count} past drives as expired")
except Exception:
    db.rollback()
    raise
finally:
    db.close()

import os

from dotenv import load_dotenv


# ======================================================
# ENV
# ======================================================

load_dotenv()

if not os.getenv("DATABASE_URL"):
    raise RuntimeError("DATABASE_URL is not set")

SEED_SAMPLE = os.getenv("SEED_SAMPLE_FACILITIES", "0") == "1"

# app.config builds Settings at import time, after .env is loaded
from app.database import SessionLocal, engine  # noqa: E402
from app.config import settings  # noqa: E402
from app.models import Base, Facilities, Halls  # noqa: E402


# ======================================================
# SAMPLE DATA
# ======================================================

SAMPLE_FACILITIES = [
    {
        "name": "イズモホール豊橋",
        "area": "豊橋市",
        "phone": "0532-55-1000",
        "halls": [
            {"name": "メインホール", "capacity": 200},
            {"name": "家族葬ホール", "capacity": 50},
        ],
    },
    {
        "name": "豊川市斎場会館 永遠の森",
        "area": "豊川市",
        "phone": "0533-85-2121",
        "halls": [
            {"name": "第1式場", "capacity": 100},
            {"name": "第2式場", "capacity": 80},
        ],
    },
    {
        "name": "家族葬の結家 蒲郡宝町",
        "area": "蒲郡市",
        "phone": "0533-68-1111",
        "halls": [
            {"name": "絆ホール", "capacity": 30},
        ],
    },
    {
        "name": "しんしろ斎苑",
        "area": "新城市",
        "phone": "0536-22-2211",
        "halls": [
            {"name": "大ホール", "capacity": 150},
        ],
    },
    {
        "name": "イズモホール田原",
        "area": "田原市",
        "phone": "0531-23-1000",
        "halls": [
            {"name": "鳳凰の間", "capacity": 120},
            {"name": "瑞雲の間", "capacity": 60},
        ],
    },
]


def seed_facilities(db) -> None:
    for data in SAMPLE_FACILITIES:
        facility = (
            db.query(Facilities)
            .filter(Facilities.name == data["name"])
            .first()
        )

        if facility:
            print(f"[BOOTSTRAP] Facility exists: {data['name']}")
            continue

        facility = Facilities(
            name=data["name"],
            area=data["area"],
            phone=data["phone"],
            turnover_interval_hours=settings.default_turnover_interval_hours,
        )
        db.add(facility)
        db.flush()

        for order, hall in enumerate(data["halls"]):
            db.add(Halls(
                facility_id=facility.id,
                name=hall["name"],
                capacity=hall["capacity"],
                has_waiting_room=1,
                display_order=order,
            ))

        print(f"[BOOTSTRAP] Facility created: {data['name']} ({len(data['halls'])} halls)")

    db.commit()


# ======================================================
# MAIN
# ======================================================

def main():
    Base.metadata.create_all(bind=engine)
    print("[BOOTSTRAP] Schema ready")

    if not SEED_SAMPLE:
        return

    db = SessionLocal()
    try:
        seed_facilities(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()

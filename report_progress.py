#!/usr/bin/env python3
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from accreditation.application.engine import AccreditationEngine
from accreditation.config.config import settings
from accreditation.config.logger import logger
from accreditation.infrastructure.db.models import Base
from accreditation.infrastructure.db.queries.overview import institution_overview_df


def main() -> None:
    logger.info("=== Accreditation progress report ===")

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    engine = create_engine(settings.database_url, echo=settings.db_echo, future=True)
    Base.metadata.create_all(engine)  # just in case
    Session = sessionmaker(bind=engine, future=True)
    session = Session()

    try:
        acc = AccreditationEngine.from_session(session)
        stats = acc.aggregator.dashboard_stats(acc.institutions.list_all())
        logger.info(
            "registered=%d, pre-qualifiers ongoing=%d / completed=%d, SAR ongoing=%d / completed=%d",
            stats.total_registered, stats.pre_qualifiers_ongoing, stats.pre_qualifiers_completed,
            stats.sar_ongoing, stats.sar_completed,
        )
        df = institution_overview_df(session)
        if df.empty:
            print("No institutions registered yet.")
        else:
            print(df.to_string(index=False))
    finally:
        session.close()
        logger.info("DB session closed.")


if __name__ == "__main__":
    main()

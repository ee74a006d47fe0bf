# riskboard/worker/scheduler.py
from __future__ import annotations

import logging
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from tzlocal import get_localzone

from riskboard.core import config
from riskboard.db.session import SessionLocal
from riskboard.services.notifications import sync_notifications

log = logging.getLogger("riskboard.scheduler")


def run_daily_alerts() -> dict:
    """
    One-shot daily pass: derive risk / overdue-action / personnel compliance
    alerts as of the local wall clock and store the new ones.
    """
    db = SessionLocal()
    try:
        result = sync_notifications(db, datetime.now())
    except Exception:
        db.rollback()
        log.exception("daily alert sync failed")
        return {"created": 0, "active": 0}
    finally:
        db.close()
    log.info("daily alert sync: %s", result)
    return result


def _timezone_name() -> str:
    if config.APP_TIMEZONE:
        return config.APP_TIMEZONE
    try:
        return str(get_localzone())
    except Exception:
        log.warning("tzlocal could not resolve the local zone; using UTC")
        return "UTC"


def make_scheduler() -> BackgroundScheduler:
    """
    BackgroundScheduler with the daily alert job, configured from env:
      - APP_TIMEZONE           (default: system tz via tzlocal or 'UTC')
      - APP_SCHEDULER_HOUR     (default: 6)
      - APP_SCHEDULER_MINUTE   (default: 0)
    """
    sched = BackgroundScheduler(timezone=_timezone_name())
    sched.add_job(
        run_daily_alerts,
        CronTrigger(hour=config.SCHEDULER_HOUR, minute=config.SCHEDULER_MINUTE),
        id="daily_alerts",
        replace_existing=True,
    )
    return sched

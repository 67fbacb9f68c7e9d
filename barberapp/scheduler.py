import atexit

from apscheduler.schedulers.background import BackgroundScheduler

from .extensions import db
from .services import get_services

scheduler = BackgroundScheduler()


def referenced_upload_urls():
    """Every image URL still stored on a barbershop or user."""
    return get_services().barbershops.referenced_image_urls()


def cleanup_uploads(app) -> int:
    with app.app_context():
        try:
            removed = get_services().storage.cleanup_old_files(
                app.config["UPLOAD_RETENTION_DAYS"],
                keep_urls=referenced_upload_urls(),
            )
            app.logger.info(f"[SCHEDULER] Removed {removed} stale upload(s)")
            return removed
        finally:
            db.session.remove()


def init_scheduler(app):
    """Run the upload cleanup once a day in the background."""
    scheduler.add_job(
        cleanup_uploads,
        "interval",
        days=1,
        args=[app],
        id="cleanup_uploads",
        replace_existing=True,
    )

    if not scheduler.running:
        scheduler.start()
        app.logger.info("[SCHEDULER] Scheduler started")
        atexit.register(lambda: scheduler.shutdown(wait=False))
    else:
        app.logger.info("[SCHEDULER] Scheduler already running (skipping duplicate start)")

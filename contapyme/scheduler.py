from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from contapyme.config import TIMEZONE
from contapyme.tasks.indicator_tasks import refresh_indicators_job

scheduler = BackgroundScheduler()

# Schedule to run every day at 9:00 AM Chile time, after mindicador.cl publishes
scheduler.add_job(refresh_indicators_job, CronTrigger(hour=9, minute=0, timezone=TIMEZONE), id='refresh_indicators_job')

"""Queue service for background jobs using RQ."""

import redis
from rq import Queue

from escout.services.jobs import send_otp_email_job


class QueueService:
    """Service for managing background job queues."""

    def __init__(self, redis_url='redis://localhost:6379/0'):
        self.redis_conn = redis.from_url(redis_url)
        self.email_queue = Queue('email', connection=self.redis_conn)

    def enqueue_otp_email(self, to_email, otp, purpose):
        """Queue a one-time passcode email."""
        job = self.email_queue.enqueue(
            send_otp_email_job,
            to_email=to_email,
            otp=otp,
            purpose=purpose,
        )
        return job

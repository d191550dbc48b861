# core/constants.py
USER_ROLE_CHOICES = (
    ('job_poster', 'Job Poster'),   # Posts jobs and accepts offers
    ('contractor', 'Contractor'),   # Submits offers against open jobs
)

JOB_STATUS_CHOICES = (
    ('open', 'Open'),                # Accepting offers
    ('in_progress', 'In Progress'),  # An offer has been accepted
    ('completed', 'Completed'),      # Work is done
)

OFFER_STATUS_CHOICES = (
    ('pending', 'Pending'),      # Contractor submitted, awaiting the job owner
    ('accepted', 'Accepted'),    # Job owner accepted this offer
    ('rejected', 'Rejected'),    # Another offer on the job was accepted
)

ACTIVE_JOB_STATUSES = ('open', 'in_progress')

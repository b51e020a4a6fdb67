"""
Job application workflow.

Covers the worker side (apply, withdraw, list own applications) and the
organizer side (review, manage view). Every write commits the application
change, the resulting notification and the activity row together, then
publishes the committed rows to the change feed.
"""

import logging
from typing import Dict, List
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from worknexus.core.realtime import INSERT, UPDATE
from worknexus.core.timeutils import utcnow
from worknexus.crud import application as application_crud
from worknexus.crud import job as job_crud
from worknexus.crud import profile as profile_crud
from worknexus.crud import worker as worker_crud
from worknexus.models.application import ApplicationStatus, JobApplication
from worknexus.models.job import Job, JobStatus
from worknexus.models.notification import NotificationType
from worknexus.models.user import User
from worknexus.models.worker import ActivityType
from worknexus.schemas.application import (
    ApplicationCreateRequest,
    ApplicationResponse,
    ApplicationWithApplicant,
    ApplicationWithJob,
    JobWithApplications,
    ReviewDecision,
)
from worknexus.schemas.job import JobResponse
from worknexus.schemas.profile import PublicProfile
from worknexus.services.events import publish_row
from worknexus.services.notifications import publish_notifications, queue_notification

logger = logging.getLogger(__name__)


def _get_job_or_404(db: Session, job_id: UUID) -> Job:
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return job


def _get_application_or_404(db: Session, application_id: UUID) -> JobApplication:
    application = application_crud.get_by_id(db, application_id)
    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return application


def submit_application(db: Session, job_id: UUID, applicant: User, data: ApplicationCreateRequest) -> JobApplication:
    """
    Apply to an open job.

    Nothing is written unless every check passes.

    Raises:
        HTTPException 400: Blank cover letter, job not open, or own job
        HTTPException 404: Job does not exist
        HTTPException 409: Already applied
    """
    cover_letter = data.cover_letter.strip()
    if not cover_letter:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please write a cover letter before applying"
        )

    job = _get_job_or_404(db, job_id)
    if job.status != JobStatus.OPEN:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This job is not accepting applications")
    if job.organizer_id == applicant.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot apply to your own job")
    if application_crud.get_for_job_and_applicant(db, job.id, applicant.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already applied to this job")

    application = JobApplication(
        job_id=job.id,
        applicant_id=applicant.id,
        cover_letter=cover_letter,
        availability=data.availability.strip() if data.availability else None,
        expected_wage=data.expected_wage,
        years_experience=data.years_experience,
        status=ApplicationStatus.PENDING,
    )
    db.add(application)
    notification = queue_notification(
        db,
        job.organizer_id,
        "New application",
        f"{applicant.full_name or 'A worker'} applied for {job.title}",
        type=NotificationType.NEW_APPLICATION,
        related_id=job.id,
    )
    db.add(worker_crud.build_activity(
        applicant.id, ActivityType.JOB_APPLICATION, f"Applied for {job.title}", related_id=job.id
    ))

    try:
        db.commit()
    except IntegrityError:
        # Concurrent duplicate submission hit the unique constraint
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already applied to this job")

    db.refresh(application)
    logger.info(f"User {applicant.id} applied to job {job.id}")

    publish_row("job_applications", INSERT, ApplicationResponse, application, [applicant.id, job.organizer_id])
    publish_notifications([notification])
    return application


def withdraw_application(db: Session, application_id: UUID, applicant: User) -> JobApplication:
    application = _get_application_or_404(db, application_id)
    if application.applicant_id != applicant.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your application")
    if application.status != ApplicationStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only pending applications can be withdrawn"
        )

    application.status = ApplicationStatus.WITHDRAWN
    db.commit()
    db.refresh(application)
    logger.info(f"Application {application.id} withdrawn")

    job = job_crud.get_by_id(db, application.job_id)
    audience = [applicant.id] + ([job.organizer_id] if job else [])
    publish_row("job_applications", UPDATE, ApplicationResponse, application, audience)
    return application


def review_application(db: Session, application_id: UUID, reviewer: User, decision: ReviewDecision) -> JobApplication:
    """
    Accept or reject a pending application.

    Accepting fills one of the job's worker slots.

    Raises:
        HTTPException 400: Application already reviewed or job full
        HTTPException 403: Reviewer does not own the job
        HTTPException 404: Application not found
    """
    application = _get_application_or_404(db, application_id)
    job = _get_job_or_404(db, application.job_id)

    if job.organizer_id != reviewer.id and not reviewer.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the job organizer can review applications")
    if application.status != ApplicationStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Application is already {application.status.value}"
        )

    if decision == ReviewDecision.ACCEPTED:
        if job.is_full:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All positions for this job are filled")
        application.status = ApplicationStatus.ACCEPTED
        job.workers_hired = (job.workers_hired or 0) + 1
        title = "Application accepted"
        message = f"You have been hired for {job.title}"
        notification_type = NotificationType.APPLICATION_ACCEPTED
        activity_type = ActivityType.APPLICATION_ACCEPTED
    else:
        application.status = ApplicationStatus.REJECTED
        title = "Application update"
        message = f"Your application for {job.title} was not selected"
        notification_type = NotificationType.APPLICATION_REJECTED
        activity_type = ActivityType.APPLICATION_REJECTED

    application.reviewed_at = utcnow()
    application.reviewed_by = reviewer.id

    notification = queue_notification(
        db, application.applicant_id, title, message, type=notification_type, related_id=job.id
    )
    db.add(worker_crud.build_activity(application.applicant_id, activity_type, message, related_id=job.id))
    db.commit()
    db.refresh(application)

    logger.info(f"Application {application.id} {application.status.value} by {reviewer.id}")

    publish_row("job_applications", UPDATE, ApplicationResponse, application, [application.applicant_id, job.organizer_id])
    publish_notifications([notification])
    return application


def list_for_applicant(db: Session, applicant: User) -> List[ApplicationWithJob]:
    """The applicant's applications, newest first, each merged with its job."""
    applications = application_crud.get_by_applicant(db, applicant.id)
    jobs = job_crud.get_many(db, (a.job_id for a in applications))

    result = []
    for application in applications:
        job = jobs.get(application.job_id)
        result.append(ApplicationWithJob(
            **ApplicationResponse.model_validate(application).model_dump(),
            job=JobResponse.model_validate(job) if job else None,
        ))
    return result


def manage_view(db: Session, organizer: User) -> List[JobWithApplications]:
    """
    Everything the organizer's "manage applications" page needs.

    Three queries regardless of size: the organizer's jobs, their
    applications (one IN query) and the applicant profiles (one IN query).
    """
    jobs = job_crud.get_by_organizer(db, organizer.id)
    applications = application_crud.get_for_jobs(db, [j.id for j in jobs])
    profiles = profile_crud.get_many(db, (a.applicant_id for a in applications))

    by_job: Dict[UUID, List[ApplicationWithApplicant]] = {j.id: [] for j in jobs}
    wages = {j.id: j.wage_per_hour for j in jobs}
    for application in applications:
        item = ApplicationWithApplicant.model_validate(application)
        profile = profiles.get(application.applicant_id)
        item.applicant = PublicProfile.model_validate(profile) if profile else None
        item.above_budget = (
            application.expected_wage is not None
            and application.expected_wage > wages[application.job_id]
        )
        by_job[application.job_id].append(item)

    result = []
    for job in jobs:
        items = by_job[job.id]
        result.append(JobWithApplications(
            **JobResponse.model_validate(job).model_dump(),
            applications=items,
            has_pending=any(a.status == ApplicationStatus.PENDING.value for a in items),
        ))
    return result

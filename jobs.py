"""
Job posting workflow.

Posting is gated by the free quota: each account may post FREE_JOB_QUOTA
jobs. The quota slot is reserved with a single conditional increment on the
user document, so concurrent posts by the same user cannot both pass the
check. If the job insert then fails the slot is released again.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

import config
from database import JOBS, USERS, get_documents, parse_object_id, serialize_document
from errors import BadRequest, Internal, NotFound, PaymentRequired

logger = logging.getLogger(__name__)


def _reserve_quota_slot(db: Database, email: str) -> None:
    reserved = db[USERS].find_one_and_update(
        {
            "email": email,
            # documents written before the counter existed count as zero
            "$or": [
                {"totalJobsPosted": {"$lt": config.FREE_JOB_QUOTA}},
                {"totalJobsPosted": {"$exists": False}},
            ],
        },
        {"$inc": {"totalJobsPosted": 1}},
        return_document=ReturnDocument.AFTER,
    )
    if reserved is not None:
        return
    if db[USERS].find_one({"email": email}, {"_id": 1}) is None:
        raise NotFound(f"User not found: {email}")
    logger.info("Job quota reached for %s", email)
    raise PaymentRequired("Payment required")


def post_job(db: Database, job_fields: Dict[str, Any], posted_by: str) -> str:
    """Insert a job for posted_by and return the new job id."""
    job = {k: v for k, v in job_fields.items() if k != "_id"}
    job["postedBy"] = posted_by
    job["createAt"] = datetime.now(timezone.utc)

    try:
        _reserve_quota_slot(db, posted_by)
    except PyMongoError:
        logger.exception("Error checking job quota for %s", posted_by)
        raise Internal("Internal server error")

    try:
        result = db[JOBS].insert_one(job)
    except PyMongoError:
        logger.exception("Error posting job for %s", posted_by)
        _release_quota_slot(db, posted_by)
        raise Internal("Cannot insert, try again later")

    return str(result.inserted_id)


def _release_quota_slot(db: Database, email: str) -> None:
    try:
        db[USERS].update_one(
            {"email": email, "totalJobsPosted": {"$gt": 0}},
            {"$inc": {"totalJobsPosted": -1}},
        )
    except PyMongoError:
        # counter now over-counts by one for this user
        logger.exception("Could not release job quota slot for %s", email)


def list_all_jobs(db: Database) -> List[Dict[str, Any]]:
    try:
        return get_documents(db, JOBS)
    except PyMongoError:
        logger.exception("Error fetching jobs")
        raise Internal("Internal server error")


def get_job(db: Database, job_id: str) -> Dict[str, Any]:
    oid = parse_object_id(job_id)
    try:
        job = db[JOBS].find_one({"_id": oid})
    except PyMongoError:
        logger.exception("Error fetching job %s", job_id)
        raise Internal("Internal server error")
    if job is None:
        raise NotFound(f"Job not found: {job_id}")
    return serialize_document(job)


def list_jobs_by_poster(db: Database, email: str) -> List[Dict[str, Any]]:
    try:
        return get_documents(db, JOBS, {"postedBy": email})
    except PyMongoError:
        logger.exception("Error fetching jobs for %s", email)
        raise Internal("Internal server error")


def delete_job(db: Database, job_id: str) -> Dict[str, Any]:
    """Delete by id. A missing id reports deletedCount 0."""
    oid = parse_object_id(job_id)
    try:
        result = db[JOBS].delete_one({"_id": oid})
    except PyMongoError:
        logger.exception("Error deleting job %s", job_id)
        raise Internal("Internal server error")
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}


def update_job(db: Database, job_id: str, fields: Dict[str, Any], upsert: bool = True) -> Dict[str, Any]:
    """
    Overwrite the given top-level fields of a job.

    With upsert a missing job is created under job_id; without it a missing
    job raises NotFound. Fields not supplied are left as they are.
    """
    oid = parse_object_id(job_id)
    changes = {k: v for k, v in fields.items() if k != "_id"}
    if not changes:
        raise BadRequest("No fields to update")
    try:
        result = db[JOBS].update_one({"_id": oid}, {"$set": changes}, upsert=upsert)
    except PyMongoError:
        logger.exception("Error updating job %s", job_id)
        raise Internal("Internal server error")
    if not upsert and result.matched_count == 0:
        raise NotFound(f"Job not found: {job_id}")
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedId": str(result.upserted_id) if result.upserted_id is not None else None,
    }

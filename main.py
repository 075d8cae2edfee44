import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from pydantic import BaseModel
from pymongo.database import Database
from starlette.datastructures import UploadFile

import config
import database
from accounts import create_or_get_oauth_user, public_user, sign_up_with_password
from database import get_database
from errors import Conflict, Internal, JobBoardError
from jobs import delete_job, get_job, list_all_jobs, list_jobs_by_poster, post_job, update_job
from payments import PayPalClient
from schemas import Email, Job
from uploads import LocalBlobStore

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("jamjob")


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = database.connect()
    if db is not None:
        database.ping(db)
        database.ensure_indexes(db)
    yield
    database.close()


app = FastAPI(title="JamJob API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class OAuthUserIn(BaseModel):
    email: Email
    googleId: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[str] = None


class SignupRequest(BaseModel):
    email: Email
    password: str


@lru_cache
def get_blob_store() -> LocalBlobStore:
    return LocalBlobStore(config.UPLOAD_DIR)


@lru_cache
def get_payment_client() -> PayPalClient:
    return PayPalClient()


@app.exception_handler(JobBoardError)
async def job_board_error_handler(request: Request, exc: JobBoardError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message, "status": False})


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Hello World!"


@app.post("/api/users")
def create_user(payload: OAuthUserIn, db: Database = Depends(get_database)):
    user, created = create_or_get_oauth_user(db, **payload.model_dump())
    if not created:
        return JSONResponse(
            status_code=409,
            content=jsonable_encoder({"message": "User already exists", "user": public_user(user)}),
        )
    return JSONResponse(
        status_code=201,
        content=jsonable_encoder({"message": "User created successfully", "user": public_user(user)}),
    )


@app.post("/api/signup", status_code=201)
def signup(payload: SignupRequest, db: Database = Depends(get_database)):
    try:
        user = sign_up_with_password(db, str(payload.email), payload.password)
    except Conflict:
        raise HTTPException(status_code=400, detail="User already exists")
    return public_user(user)


@app.get("/get-logo/uploads/{filename}")
def get_logo(filename: str, store: LocalBlobStore = Depends(get_blob_store)):
    return FileResponse(store.resolve(filename))


@app.post("/upload-logo")
async def upload_logo(request: Request, store: LocalBlobStore = Depends(get_blob_store)):
    form = await request.form()
    file = form.get("file")
    # a part sent without a filename arrives as a plain string field
    if not isinstance(file, UploadFile) or not file.filename:
        return JSONResponse(status_code=400, content={"message": "No file uploaded"})
    data = await file.read()
    url = await run_in_threadpool(store.store_upload, data, file.filename)
    return {"url": url}


@app.post("/post-job")
def create_job(payload: Job, db: Database = Depends(get_database)):
    fields = payload.model_dump(exclude={"postedBy", "createAt"})
    job_id = post_job(db, fields, str(payload.postedBy))
    return {"acknowledged": True, "insertedId": job_id}


@app.get("/all-jobs")
def all_jobs(db: Database = Depends(get_database)):
    return list_all_jobs(db)


@app.get("/all-jobs/{job_id}")
def single_job(job_id: str, db: Database = Depends(get_database)):
    return get_job(db, job_id)


@app.get("/my-jobs/{email}")
def my_jobs(email: str, db: Database = Depends(get_database)):
    return list_jobs_by_poster(db, email)


@app.delete("/job/{job_id}")
def remove_job(job_id: str, db: Database = Depends(get_database)):
    return delete_job(db, job_id)


@app.patch("/update-job/{job_id}")
def edit_job(
    job_id: str,
    fields: Dict[str, Any] = Body(...),
    upsert: bool = True,
    db: Database = Depends(get_database),
):
    return update_job(db, job_id, fields, upsert=upsert)


@app.post("/create-paypal-payment")
def create_paypal_payment(client: PayPalClient = Depends(get_payment_client)):
    try:
        link = client.create_checkout(config.CHECKOUT_AMOUNT, config.CHECKOUT_CURRENCY)
    except Internal:
        return JSONResponse(status_code=500, content={"error": "Something went wrong"})
    return {"forwardLink": link}


if __name__ == "__main__":
    import uvicorn
    logger.info("JamJob API listening on port %s", config.PORT)
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)

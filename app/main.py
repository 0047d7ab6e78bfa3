import os
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.exceptions import GradingError

from app.routes.users.teacher.assignment import router as teacher_assignment_router
from app.routes.users.teacher.assignment_submission import router as teacher_assignment_submission_router
from app.routes.users.student.assignment import router as student_assignment_router
from app.routes.users.student.assignment_submissions import router as student_assignment_submission_router


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app=FastAPI(
    title="Assignment Grading Service"
)


@app.exception_handler(GradingError)
async def grading_error_handler(request: Request, exc: GradingError):
    logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/")
def root():
    return {
        "message":"Assignment Grading Service is Running!"
        }


app.include_router(teacher_assignment_router)
app.include_router(teacher_assignment_submission_router)

app.include_router(student_assignment_router)
app.include_router(student_assignment_submission_router)

"""Program and major API schemas."""

from pydantic import BaseModel

from app.application.dtos import Major, Program


class ProgramResponse(BaseModel):
    program: Program


class ProgramListResponse(BaseModel):
    programs: list[Program]


class MajorListResponse(BaseModel):
    majors: list[Major]

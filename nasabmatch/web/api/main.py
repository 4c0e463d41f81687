"""FastAPI application for family tree placement matching.

The host system posts a snapshot of its members with every request; nothing
is stored between requests.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ... import __version__
from ...core.member import FamilyMember, MALE, LIVING
from ...errors import CyclicLineageError, InvalidConfiguration, MissingRequiredField
from ...lineage import (
    calculate_lineage_info,
    format_lineage_display,
    generate_full_name,
    get_full_lineage,
)
from ...matching import MatchConfig, NameInput, find_matches

logger = logging.getLogger(__name__)

app = FastAPI(
    title="nasabmatch API",
    description="Find where a new person belongs in the family tree from partial ancestor names",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models for API
class MemberModel(BaseModel):
    id: str
    first_name: str
    gender: str = MALE
    father_id: Optional[str] = None
    generation: int = 1
    branch: Optional[str] = None
    family_name: Optional[str] = None
    full_name_en: Optional[str] = None
    status: str = LIVING
    birth_year: Optional[int] = None


class NameInputModel(BaseModel):
    first_name: str
    father_name: str
    grandfather_name: Optional[str] = None
    great_grandfather_name: Optional[str] = None
    gender: Literal["Male", "Female"] = MALE


class MatchRequest(BaseModel):
    name: NameInputModel
    members: List[MemberModel]
    config: Optional[Dict[str, Any]] = None


class LineageRequest(BaseModel):
    members: List[MemberModel]


def _to_members(models: List[MemberModel]) -> List[FamilyMember]:
    return [FamilyMember.from_dict(m.model_dump()) for m in models]


@app.get("/health")
async def health():
    """Liveness check."""
    return {'status': 'ok', 'version': __version__}


@app.post("/api/match")
async def match(request: MatchRequest):
    """Find candidate fathers for a new person."""
    try:
        config = MatchConfig.from_dict(request.config)
    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))

    name_input = NameInput(**request.name.model_dump())
    members = _to_members(request.members)

    try:
        result = find_matches(name_input, members, config)
    except MissingRequiredField as e:
        raise HTTPException(status_code=422, detail={'field': e.field, 'message': str(e)})

    logger.info(f"Match request for '{name_input.first_name}': {result}")
    return result.to_dict()


@app.post("/api/lineage/{member_id}")
async def lineage(member_id: str, request: LineageRequest):
    """Lineage path, branch and full name of an existing member."""
    members = _to_members(request.members)

    try:
        full_lineage = get_full_lineage(member_id, members)
        if not full_lineage:
            raise HTTPException(status_code=404, detail="Member not found")

        member = full_lineage[-1]
        info = calculate_lineage_info(member_id, members)
    except CyclicLineageError as e:
        logger.warning(f"Lineage request for {member_id} failed: {e}")
        raise HTTPException(status_code=409, detail=str(e))

    return {
        'memberId': member.id,
        'generation': member.generation,
        'lineagePath': info.lineage_path,
        'lineageBranchId': info.lineage_branch_id,
        'lineageBranchName': info.lineage_branch_name,
        'subBranchId': info.sub_branch_id,
        'subBranchName': info.sub_branch_name,
        'display': format_lineage_display(member, info),
        'fullName': generate_full_name(
            member.first_name, member.gender, full_lineage[:-1], member.family_name
        ),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

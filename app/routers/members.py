"""
Members router - CRUD for the people shown on the family calendar.

Members are not logins. A member with an iCal URL has that feed merged
into the calendar views under their color; hidden members are left out.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_current_user
from app.models.family_member import FamilyMember
from app.models.user import User
from app.schemas.member import MemberCreate, MemberOut, MemberUpdate


logger = logging.getLogger("familyhub.routers.members")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/members", tags=["members"])


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------

def get_member_or_404(db: Session, member_id: str, family_id: str) -> FamilyMember:
    """
    Get a member by id, ensuring it belongs to the family.

    Raises:
        404: If the member does not exist or belongs to another family
    """
    member = db.query(FamilyMember).filter(
        FamilyMember.id == member_id,
        FamilyMember.family_id == family_id,
    ).first()

    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found",
        )

    return member


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.post("", response_model=MemberOut, status_code=status.HTTP_201_CREATED)
def create_member(
    payload: MemberCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add a member to the current user's family."""
    member = FamilyMember(
        family_id=current_user.family_id,
        name=payload.name.strip(),
        color=payload.color,
        ical_url=payload.ical_url.strip(),
        hidden=payload.hidden,
    )
    db.add(member)
    db.commit()
    db.refresh(member)

    logger.info(
        f"Created member {member.id}",
        extra={"family_id": current_user.family_id, "has_feed": member.has_feed()},
    )
    return member


@router.get("", response_model=list[MemberOut])
def list_members(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List all members (hidden ones included) in creation order."""
    return (
        db.query(FamilyMember)
        .filter(FamilyMember.family_id == current_user.family_id)
        .order_by(FamilyMember.created_at)
        .all()
    )


@router.get("/{member_id}", response_model=MemberOut)
def get_member(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_member_or_404(db, member_id, current_user.family_id)


@router.patch("/{member_id}", response_model=MemberOut)
def update_member(
    member_id: str,
    payload: MemberUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a member. Only provided fields are changed."""
    member = get_member_or_404(db, member_id, current_user.family_id)

    update_data = payload.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None:
            continue
        setattr(member, field, value.strip() if isinstance(value, str) else value)

    db.commit()
    db.refresh(member)
    return member


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    member = get_member_or_404(db, member_id, current_user.family_id)
    db.delete(member)
    db.commit()
    return None

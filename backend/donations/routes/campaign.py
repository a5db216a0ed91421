"""
Campaign Routes — Minimal campaign registry donations are raised against.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from donations.database import get_db
from donations.models.campaign import Campaign
from donations.schemas.schemas import CampaignCreateRequest, CampaignResponse

router = APIRouter(prefix="/api/campaigns", tags=["Campaigns"])


@router.post("", response_model=CampaignResponse, status_code=201)
def create_campaign(payload: CampaignCreateRequest, db: Session = Depends(get_db)):
    """Register a fundraising campaign."""
    campaign = Campaign(title=payload.title, goal=payload.goal, community_id=payload.community_id)
    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    return campaign


@router.get("/{campaign_id}", response_model=CampaignResponse)
def get_campaign(campaign_id: int, db: Session = Depends(get_db)):
    """Get a campaign with its raised total."""
    campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
    if not campaign:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign

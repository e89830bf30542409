"""
Reward catalog and redemption endpoints
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, require_admin
from ecolearn.schemas_rewards import RedemptionStatusUpdate, RewardCreate, RewardUpdate
from ecolearn.services.reward_service import reward_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/redeem", tags=["Rewards"])


@router.get("")
async def list_rewards():
    try:
        rewards = await reward_service.list_active()
        return {"success": True, "data": rewards}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing rewards: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/history")
async def redemption_history(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        redemptions = await reward_service.history(user)
        return {"success": True, "data": redemptions}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting redemption history for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{reward_id}")
async def redeem_reward(reward_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    """Spend points on a reward"""
    try:
        result = await reward_service.redeem(user, reward_id)
        return {"success": True, "message": "Reward redeemed successfully", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error redeeming reward {reward_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


# ========== ADMIN ==========

@router.get("/admin/redemptions")
async def all_redemptions(user: Dict[str, Any] = Depends(require_admin())):
    try:
        redemptions = await reward_service.all_redemptions()
        return {"success": True, "data": redemptions}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing redemptions: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/admin/redemptions/{redemption_id}")
async def update_redemption_status(
    redemption_id: str,
    request: RedemptionStatusUpdate,
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        redemption = await reward_service.update_redemption_status(redemption_id, request.status)
        return {"success": True, "data": redemption}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating redemption {redemption_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/admin/rewards")
async def all_rewards(user: Dict[str, Any] = Depends(require_admin())):
    try:
        rewards = await reward_service.list_all()
        return {"success": True, "data": rewards}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing all rewards: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/admin/rewards", status_code=status.HTTP_201_CREATED)
async def create_reward(request: RewardCreate, user: Dict[str, Any] = Depends(require_admin())):
    try:
        reward = await reward_service.create_reward(user, request.model_dump())
        return {"success": True, "data": reward}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error creating reward: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/admin/rewards/{reward_id}")
async def update_reward(
    reward_id: str,
    request: RewardUpdate,
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        reward = await reward_service.update_reward(reward_id, request.model_dump(exclude_unset=True))
        return {"success": True, "data": reward}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating reward {reward_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/admin/rewards/{reward_id}")
async def delete_reward(reward_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        await reward_service.delete_reward(reward_id)
        return {"success": True, "message": "Reward deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting reward {reward_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

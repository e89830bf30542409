"""
Platform review endpoints
"""
import logging
from typing import Dict, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, require_admin
from ecolearn.schemas_community import PlatformReviewRequest
from ecolearn.services.community_service import review_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("")
async def approved_reviews(page: int = Query(1, ge=1), limit: int = Query(10, ge=1, le=100)):
    try:
        result = await review_service.approved(page, limit)
        return {"success": True, "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing reviews: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/latest")
async def latest_reviews():
    try:
        reviews = await review_service.latest()
        return {"success": True, "data": reviews}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing latest reviews: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_review(request: PlatformReviewRequest, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        review = await review_service.submit(user, request.rating, request.comment)
        return {"success": True, "message": "Review submitted and awaiting approval", "data": review}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error submitting review: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/my-review")
async def my_review(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        review = await review_service.mine(user)
        return {"success": True, "data": review}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting review for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/my-review")
async def update_my_review(request: PlatformReviewRequest, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        review = await review_service.update_mine(user, request.rating, request.comment)
        return {"success": True, "message": "Review updated and awaiting approval", "data": review}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating review for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/my-review")
async def delete_my_review(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        await review_service.delete_mine(user)
        return {"success": True, "message": "Review deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting review for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/admin")
async def admin_reviews(
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        result = await review_service.list_for_admin(status, page, limit)
        return {"success": True, "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing reviews for admin: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/admin/pending")
async def pending_reviews(user: Dict[str, Any] = Depends(require_admin())):
    try:
        reviews = await review_service.pending()
        return {"success": True, "data": reviews, "count": len(reviews)}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing pending reviews: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/admin/approve/{review_id}")
async def approve_review(review_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        review = await review_service.set_status(review_id, 'approved')
        return {"success": True, "message": "Review approved", "data": review}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error approving review {review_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/admin/reject/{review_id}")
async def reject_review(review_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        review = await review_service.set_status(review_id, 'rejected')
        return {"success": True, "message": "Review rejected", "data": review}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error rejecting review {review_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/admin/{review_id}")
async def delete_review(review_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        await review_service.delete(review_id)
        return {"success": True, "message": "Review deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting review {review_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

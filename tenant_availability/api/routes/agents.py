from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_availability.api.deps import get_current_user
from tenant_availability.core.db import get_session
from tenant_availability.core.security import is_admin_role
from tenant_availability.models.availability import AgentAvailability
from tenant_availability.models.user import User
from tenant_availability.services.config_service import get_agent, set_agent_availability

router = APIRouter(prefix="/agents", tags=["agents"])


async def _load_agent(session: AsyncSession, current_user: User, agent_id: str) -> User:
    agent = await get_agent(session, current_user.tenant_id, agent_id)
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Agent not found",
        )
    return agent


@router.get("/{agent_id}/availability", response_model=AgentAvailability | None)
async def get_agent_availability(
    agent_id: str,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AgentAvailability | None:
    """Working windows, or null when the agent is unconstrained."""
    agent = await _load_agent(session, current_user, agent_id)
    if agent.availability is None:
        return None
    try:
        return AgentAvailability.model_validate(agent.availability)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Stored availability is malformed",
        ) from e


@router.put("/{agent_id}/availability", response_model=AgentAvailability)
async def put_agent_availability(
    agent_id: str,
    body: AgentAvailability,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AgentAvailability:
    # Admins manage every agent; an agent may edit only their own windows
    if not is_admin_role(current_user.role) and current_user.id != agent_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized",
        )
    agent = await _load_agent(session, current_user, agent_id)
    agent = await set_agent_availability(session, agent, body)
    return AgentAvailability.model_validate(agent.availability)

"""Repository listing and token scope endpoints."""

from fastapi import APIRouter

from boardkit.api.dependencies import RestClientDep
from boardkit.api.models import APIResponse, RepositoryResponse, ScopeCheckResponse

router = APIRouter(tags=["repos"])


@router.get("/repos", response_model=APIResponse[list[RepositoryResponse]])
def list_repos(rest: RestClientDep) -> APIResponse[list[RepositoryResponse]]:
    """List repositories owned by the authenticated user."""
    repos = rest.list_user_repos()
    return APIResponse(data=[RepositoryResponse.model_validate(r) for r in repos])


@router.get("/scopes", response_model=APIResponse[ScopeCheckResponse])
def check_scopes(rest: RestClientDep) -> APIResponse[ScopeCheckResponse]:
    """Report the token's scopes and whether it can create project boards."""
    scopes = rest.get_token_scopes()
    return APIResponse(
        data=ScopeCheckResponse(
            scopes=scopes,
            has_project_scope="project" in scopes,
        )
    )

"""Board generation endpoint."""

import logging

from fastapi import APIRouter

from boardkit.api.dependencies import CatalogDep, GeneratorDep, RestClientDep
from boardkit.api.models import APIResponse, GenerateRequest, GenerateResponse
from boardkit.github import RepositoryAccessError

logger = logging.getLogger("boardkit.api")

router = APIRouter(tags=["generate"])


@router.post("/generate", response_model=APIResponse[GenerateResponse])
def generate_board(
    request: GenerateRequest,
    catalog: CatalogDep,
    rest: RestClientDep,
    generator: GeneratorDep,
) -> APIResponse[GenerateResponse]:
    """Create the template's labels and issues in a repository, plus an optional board."""
    if request.template is not None:
        template = request.template.to_template()
    else:
        # Validated: template_id is set when template is not
        template = catalog.get(str(request.template_id))

    if not rest.verify_access(request.owner, request.repo):
        raise RepositoryAccessError(f"No access to {request.owner}/{request.repo}")

    board_config = request.board_config.to_board_config() if request.board_config else None

    result = generator.generate(request.owner, request.repo, template, board_config)

    repository_url = f"https://github.com/{request.owner}/{request.repo}"
    return APIResponse(
        data=GenerateResponse(
            issues_created=result.issues_created,
            issues_skipped=result.issues_skipped,
            labels_created=result.labels_created,
            labels_updated=result.labels_updated,
            labels_unchanged=result.labels_unchanged,
            project_url=result.project_url,
            repository_url=repository_url,
            issues_url=f"{repository_url}/issues",
            failures=result.failures,
            warnings=list(result.warnings),
        )
    )

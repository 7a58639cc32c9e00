"""Generation logic package.

This package groups the helpers that orchestrate the multi-step analysis
workflow (upload registration, base analysis, artifact generation) and the
canned content the simulated generators return.
Keeping them here allows `app/api/routes.py` to stay minimal and focused on
HTTP routing while core business logic lives in composable modules.

Import the submodules directly: `app.services.pipeline` depends on
`static_content`, and the orchestrators depend on the pipeline.
"""

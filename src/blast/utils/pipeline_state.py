from esper import World

from blast.components.pipeline_state import PipelineState


def get_or_create_pipeline_state(world: World) -> PipelineState:
    """Return the shared PipelineState component, creating it if absent."""
    existing = list(world.get_component(PipelineState))
    if existing:
        return existing[0][1]
    world.create_entity(PipelineState())
    return list(world.get_component(PipelineState))[0][1]

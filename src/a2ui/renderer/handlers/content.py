"""Content component handlers."""

from a2ui.catalog import AudioPlayer, FallbackReason, Icon, Image, Text, Video
from ..context import RenderContext
from ..nodes import RenderNode


def render_text(component: Text, ctx: RenderContext) -> RenderNode:
    props = ctx.base_props(component)
    props["text"] = ctx.string(component.text)
    props["variant"] = component.variant or "body"
    return RenderNode(kind="Text", component_id=component.id, props=props)


def render_image(component: Image, ctx: RenderContext) -> RenderNode:
    url = ctx.string(component.url) if component.url is not None else ""
    if not url:
        # A prompt-only image must be resolved to a URL before rendering
        return ctx.fallback(
            component.id,
            FallbackReason.IMAGE_UNRESOLVED,
            "Image",
            "no url" if component.prompt is None else "prompt not resolved",
        )
    props = ctx.base_props(component)
    props["url"] = url
    props["fit"] = component.fit or "contain"
    if component.variant is not None:
        props["variant"] = component.variant
    return RenderNode(kind="Image", component_id=component.id, props=props)


def render_icon(component: Icon, ctx: RenderContext) -> RenderNode:
    props = ctx.base_props(component)
    props["name"] = ctx.string(component.name)
    return RenderNode(kind="Icon", component_id=component.id, props=props)


def render_video(component: Video, ctx: RenderContext) -> RenderNode:
    props = ctx.base_props(component)
    props["url"] = ctx.string(component.url)
    return RenderNode(kind="Video", component_id=component.id, props=props)


def render_audio_player(component: AudioPlayer, ctx: RenderContext) -> RenderNode:
    props = ctx.base_props(component)
    props["url"] = ctx.string(component.url)
    if component.description is not None:
        props["description"] = ctx.string(component.description)
    return RenderNode(kind="AudioPlayer", component_id=component.id, props=props)


CONTENT_HANDLERS = {
    "Text": render_text,
    "Image": render_image,
    "Icon": render_icon,
    "Video": render_video,
    "AudioPlayer": render_audio_player,
}

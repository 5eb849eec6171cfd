"""
Event classifier.

The chat platform has delivered the same logical event under several payload
revisions. Classification is probe-ordered: the shape rules below are tried in
order and the first rule whose marker is present decides the kind. Field
resolution then walks per-field probe lists over the matched payload and the
whole tree.

Adding a new event shape means adding a ShapeRule; adding a new location for a
field means adding a Probe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional

from app.core.json_tree import get_dict, get_int, get_list, get_path, get_str, has_path
from app.core.probes import Probe, ProbeList
from app.schemas.chat_event import ChatEvent, EventKind, Sender, SenderType

logger = logging.getLogger(__name__)

EventTree = dict[str, Any]


def _legacy_type(tree: EventTree) -> Optional[str]:
    """Bare ``type``/``eventType`` discriminator used by older event shapes."""
    value = get_str(tree, "type") or get_str(tree, "eventType")
    return value.upper() if value else None


def _whole_tree(tree: EventTree) -> EventTree:
    return tree


def _chat_payload(key: str) -> Callable[[EventTree], EventTree]:
    def extract(tree: EventTree) -> EventTree:
        return get_dict(tree, "chat", key) or {}

    return extract


@dataclass(frozen=True)
class ShapeRule:
    """Maps a marker predicate to an event kind and the payload to read fields from."""

    name: str
    kind: EventKind
    matches: Callable[[EventTree], bool]
    payload: Callable[[EventTree], EventTree]


SHAPE_RULES: tuple[ShapeRule, ...] = (
    ShapeRule(
        "commonEventObject.invokedFunction",
        EventKind.CARD_CLICK,
        lambda t: has_path(t, "commonEventObject", "invokedFunction"),
        _chat_payload("buttonClickedPayload"),
    ),
    ShapeRule(
        "chat.buttonClickedPayload",
        EventKind.CARD_CLICK,
        lambda t: has_path(t, "chat", "buttonClickedPayload"),
        _chat_payload("buttonClickedPayload"),
    ),
    ShapeRule(
        "chat.appCommandPayload",
        EventKind.APP_COMMAND,
        lambda t: has_path(t, "chat", "appCommandPayload"),
        _chat_payload("appCommandPayload"),
    ),
    ShapeRule(
        "chat.messagePayload",
        EventKind.MESSAGE,
        lambda t: has_path(t, "chat", "messagePayload"),
        _chat_payload("messagePayload"),
    ),
    ShapeRule(
        "chat.addedToSpacePayload",
        EventKind.ADDED_TO_SPACE,
        lambda t: has_path(t, "chat", "addedToSpacePayload"),
        _chat_payload("addedToSpacePayload"),
    ),
    # Legacy shapes: bare user/space/message at the top level.
    ShapeRule(
        "common.invokedFunction",
        EventKind.CARD_CLICK,
        lambda t: has_path(t, "common", "invokedFunction"),
        _whole_tree,
    ),
    ShapeRule(
        "type=CARD_CLICKED",
        EventKind.CARD_CLICK,
        lambda t: _legacy_type(t) == "CARD_CLICKED",
        _whole_tree,
    ),
    ShapeRule(
        "type=MESSAGE+slashCommand",
        EventKind.APP_COMMAND,
        lambda t: _legacy_type(t) == "MESSAGE" and has_path(t, "message", "slashCommand"),
        _whole_tree,
    ),
    ShapeRule(
        "appCommandMetadata",
        EventKind.APP_COMMAND,
        lambda t: has_path(t, "appCommandMetadata"),
        _whole_tree,
    ),
    ShapeRule(
        "type=MESSAGE",
        EventKind.MESSAGE,
        lambda t: _legacy_type(t) == "MESSAGE",
        _whole_tree,
    ),
    ShapeRule(
        "type=ADDED_TO_SPACE",
        EventKind.ADDED_TO_SPACE,
        lambda t: _legacy_type(t) == "ADDED_TO_SPACE",
        _whole_tree,
    ),
)


class ProbeSource(NamedTuple):
    """What field probes see: the full tree and the payload of the matched rule."""

    tree: EventTree
    payload: EventTree


SPACE_NAME_PROBES: ProbeList[str] = ProbeList(
    [
        Probe("payload.space.name", lambda s: get_str(s.payload, "space", "name")),
        Probe("space.name", lambda s: get_str(s.tree, "space", "name")),
        Probe("chat.space.name", lambda s: get_str(s.tree, "chat", "space", "name")),
        Probe(
            "commonEventObject.hostAppMetadata.chatMetadata.space.name",
            lambda s: get_str(
                s.tree,
                "commonEventObject",
                "hostAppMetadata",
                "chatMetadata",
                "space",
                "name",
            ),
        ),
        Probe(
            "commonEventObject.hostAppMetadata.chatMetadata.spaceName",
            lambda s: get_str(
                s.tree, "commonEventObject", "hostAppMetadata", "chatMetadata", "spaceName"
            ),
        ),
        Probe(
            "chat.buttonClickedPayload.space.name",
            lambda s: get_str(s.tree, "chat", "buttonClickedPayload", "space", "name"),
        ),
        Probe(
            "payload.message.space.name",
            lambda s: get_str(s.payload, "message", "space", "name"),
        ),
    ]
)

THREAD_NAME_PROBES: ProbeList[str] = ProbeList(
    [
        Probe(
            "payload.message.thread.name",
            lambda s: get_str(s.payload, "message", "thread", "name"),
        ),
        Probe("message.thread.name", lambda s: get_str(s.tree, "message", "thread", "name")),
        Probe(
            "chat.buttonClickedPayload.message.thread.name",
            lambda s: get_str(
                s.tree, "chat", "buttonClickedPayload", "message", "thread", "name"
            ),
        ),
    ]
)

SENDER_PROBES: ProbeList[dict] = ProbeList(
    [
        Probe("payload.message.sender", lambda s: get_dict(s.payload, "message", "sender")),
        Probe("message.sender", lambda s: get_dict(s.tree, "message", "sender")),
        Probe("payload.user", lambda s: get_dict(s.payload, "user")),
        Probe("chat.user", lambda s: get_dict(s.tree, "chat", "user")),
        Probe("user", lambda s: get_dict(s.tree, "user")),
    ]
)

# Clicks and installs take the acting user. A clicked card message is
# always sent by the app itself.
ACTOR_PROBES: ProbeList[dict] = ProbeList(
    [
        Probe("payload.user", lambda s: get_dict(s.payload, "user")),
        Probe("chat.user", lambda s: get_dict(s.tree, "chat", "user")),
        Probe("user", lambda s: get_dict(s.tree, "user")),
    ]
)

TEXT_PROBES: ProbeList[str] = ProbeList(
    [
        Probe("payload.message.text", lambda s: get_str(s.payload, "message", "text")),
        Probe("message.text", lambda s: get_str(s.tree, "message", "text")),
    ]
)

COMMAND_ID_PROBES: ProbeList[int] = ProbeList(
    [
        Probe(
            "payload.appCommandMetadata.appCommandId",
            lambda s: get_int(s.payload, "appCommandMetadata", "appCommandId"),
        ),
        Probe(
            "appCommandMetadata.appCommandId",
            lambda s: get_int(s.tree, "appCommandMetadata", "appCommandId"),
        ),
        Probe(
            "payload.message.slashCommand.commandId",
            lambda s: get_int(s.payload, "message", "slashCommand", "commandId"),
        ),
        Probe(
            "message.slashCommand.commandId",
            lambda s: get_int(s.tree, "message", "slashCommand", "commandId"),
        ),
    ]
)

ACTION_ID_PROBES: ProbeList[str] = ProbeList(
    [
        Probe(
            "commonEventObject.invokedFunction",
            lambda s: get_str(s.tree, "commonEventObject", "invokedFunction"),
        ),
        Probe("common.invokedFunction", lambda s: get_str(s.tree, "common", "invokedFunction")),
        Probe("action.actionMethodName", lambda s: get_str(s.tree, "action", "actionMethodName")),
        Probe(
            "commonEventObject.parameters.actionMethodName",
            lambda s: get_str(s.tree, "commonEventObject", "parameters", "actionMethodName"),
        ),
    ]
)

MESSAGE_NAME_PROBES: ProbeList[str] = ProbeList(
    [
        Probe("payload.message.name", lambda s: get_str(s.payload, "message", "name")),
        Probe("message.name", lambda s: get_str(s.tree, "message", "name")),
        Probe(
            "chat.buttonClickedPayload.message.name",
            lambda s: get_str(s.tree, "chat", "buttonClickedPayload", "message", "name"),
        ),
    ]
)


def _string_mapping(node: Any) -> dict[str, str]:
    """
    Normalize action parameters to ``{key: value}``.

    Accepts a JSON object, or the legacy list of ``{"key": ..., "value": ...}`` pairs.
    """
    result: dict[str, str] = {}
    if isinstance(node, dict):
        for key, value in node.items():
            if value is None or isinstance(value, (dict, list)):
                continue
            result[str(key)] = str(value)
    elif isinstance(node, list):
        for entry in node:
            key = get_str(entry, "key")
            if key is None:
                continue
            result[key] = get_str(entry, "value") or ""
    return result


PARAMETER_PROBES: ProbeList[dict] = ProbeList(
    [
        Probe(
            "commonEventObject.parameters",
            lambda s: _string_mapping(get_path(s.tree, "commonEventObject", "parameters")),
        ),
        Probe("common.parameters", lambda s: _string_mapping(get_path(s.tree, "common", "parameters"))),
        Probe("action.parameters", lambda s: _string_mapping(get_list(s.tree, "action", "parameters"))),
    ]
)


def _string_inputs(node: Any) -> Optional[list[str]]:
    values = get_list(node, "stringInputs", "value")
    if values is None:
        # Older add-on events nested inputs one level deeper under an empty key.
        values = get_list(node, "", "stringInputs", "value")
    if values is None:
        return None
    return [str(v) for v in values if v is not None]


def _form_inputs(node: Any) -> dict[str, list[str]]:
    result: dict[str, list[str]] = {}
    if not isinstance(node, dict):
        return result
    for name, value in node.items():
        values = _string_inputs(value)
        if values is not None:
            result[name] = values
    return result


FORM_INPUT_PROBES: ProbeList[dict] = ProbeList(
    [
        Probe(
            "commonEventObject.formInputs",
            lambda s: _form_inputs(get_dict(s.tree, "commonEventObject", "formInputs")),
        ),
        Probe("common.formInputs", lambda s: _form_inputs(get_dict(s.tree, "common", "formInputs"))),
    ]
)


def match_shape(tree: EventTree) -> Optional[ShapeRule]:
    """Return the first shape rule whose marker is present, or None."""
    for rule in SHAPE_RULES:
        if rule.matches(tree):
            return rule
    return None


def _resolve_sender(kind: EventKind, source: ProbeSource) -> Optional[Sender]:
    if kind in (EventKind.CARD_CLICK, EventKind.ADDED_TO_SPACE):
        probes = ACTOR_PROBES
    else:
        probes = SENDER_PROBES
    node = probes.resolve(source)
    if node is None:
        return None
    return Sender(
        display_name=get_str(node, "displayName") or "",
        sender_type=SenderType.parse(get_str(node, "type")),
    )


def classify(tree: EventTree) -> ChatEvent:
    """Infer the event kind from the tree and resolve its fields."""
    rule = match_shape(tree)
    if rule is None:
        logger.warning("Unhandled chat event structure. Keys: %s", sorted(tree.keys()))
        source = ProbeSource(tree=tree, payload={})
        return ChatEvent(
            kind=EventKind.UNKNOWN,
            space_name=SPACE_NAME_PROBES.resolve(source),
            raw=tree,
        )

    source = ProbeSource(tree=tree, payload=rule.payload(tree))
    space_probe, space_name = SPACE_NAME_PROBES.first_match(source)
    logger.info(
        "Classified chat event as %s via %s (space from %s)",
        rule.kind.value,
        rule.name,
        space_probe,
    )

    event = ChatEvent(
        kind=rule.kind,
        space_name=space_name,
        sender=_resolve_sender(rule.kind, source),
        matched_probe=rule.name,
        raw=tree,
    )
    if rule.kind != EventKind.ADDED_TO_SPACE:
        event.thread_name = THREAD_NAME_PROBES.resolve(source)

    if rule.kind == EventKind.MESSAGE:
        event.text = TEXT_PROBES.resolve(source)
    elif rule.kind == EventKind.APP_COMMAND:
        event.command_id = COMMAND_ID_PROBES.resolve(source)
    elif rule.kind == EventKind.CARD_CLICK:
        event.action_id = ACTION_ID_PROBES.resolve(source)
        event.parameters = PARAMETER_PROBES.resolve(source) or {}
        event.form_inputs = FORM_INPUT_PROBES.resolve(source) or {}
        event.message_name = MESSAGE_NAME_PROBES.resolve(source)
    return event

"""
Interactive card layouts sent in reply to app commands.

Each builder returns a fully specified, deterministic CardDefinition. Button
actions reference the card click functions in ``app.constants.chat`` so that a
later click on the card is routed back to the matching handler.
"""

from __future__ import annotations

from app.constants.chat import (
    ACCESSORY_ITEM_PARAMETER,
    ACTION_ACCESSORY_CLICK,
    ACTION_CARD_CLICK,
    ACTION_SUBMIT_SELECTION,
    ACTION_UPDATE_MESSAGE,
    SELECTION_FIELD,
)
from app.schemas.reply import (
    Button,
    ButtonListWidget,
    CardAction,
    CardDefinition,
    DecoratedTextWidget,
    PlatformSource,
    SelectionInputWidget,
    SelectionItem,
)

SELECTION_OPTIONS = (
    ("Red", "red"),
    ("Green", "green"),
    ("Blue", "blue"),
    ("Yellow", "yellow"),
)
ACCESSORY_ITEMS = ("alpha", "beta")
MAX_SELECTED_USERS = 3


def _submit_button() -> Button:
    return Button(text="Submit", action=CardAction(function_id=ACTION_SUBMIT_SELECTION))


def build_button_card() -> CardDefinition:
    return CardDefinition(
        id="interactive-card-1",
        title="Interactive Card",
        widgets=[
            ButtonListWidget(
                buttons=[
                    Button(
                        text="Click Me",
                        action=CardAction(
                            function_id=ACTION_CARD_CLICK,
                            parameters={"action_key": "action_value"},
                        ),
                    )
                ]
            )
        ],
    )


def build_update_message_card() -> CardDefinition:
    """Card whose button replaces the card message itself with plain text."""
    return CardDefinition(
        id="update-message-card",
        title="Update Message",
        widgets=[
            DecoratedTextWidget(text="Click the button to update this message."),
            ButtonListWidget(
                buttons=[
                    Button(
                        text="Update",
                        action=CardAction(function_id=ACTION_UPDATE_MESSAGE),
                    )
                ]
            ),
        ],
    )


def build_text_selection_card(multi_select: bool = True) -> CardDefinition:
    """Static-item selection card; dropdown when ``multi_select`` is False."""
    return CardDefinition(
        id="multi-selection-card" if multi_select else "single-selection-card",
        title="Pick colors" if multi_select else "Pick a color",
        widgets=[
            SelectionInputWidget(
                name=SELECTION_FIELD,
                label="Colors" if multi_select else "Color",
                multi_select=multi_select,
                max_selected=len(SELECTION_OPTIONS) if multi_select else None,
                items=[SelectionItem(text=text, value=value) for text, value in SELECTION_OPTIONS],
            ),
            ButtonListWidget(buttons=[_submit_button()]),
        ],
    )


def build_user_selection_card() -> CardDefinition:
    """Selection input populated by the chat platform with workspace users."""
    return CardDefinition(
        id="user-selection-card",
        title="Pick people",
        widgets=[
            SelectionInputWidget(
                name=SELECTION_FIELD,
                label="People",
                multi_select=True,
                max_selected=MAX_SELECTED_USERS,
                platform_source=PlatformSource.USER,
            ),
            ButtonListWidget(buttons=[_submit_button()]),
        ],
    )


def build_accessory_card() -> CardDefinition:
    """Decorated text rows, each with an accessory button."""
    return CardDefinition(
        id="accessory-card",
        title="Accessory Widgets",
        widgets=[
            DecoratedTextWidget(
                text=f"Item {item}",
                button=Button(
                    text="Open",
                    action=CardAction(
                        function_id=ACTION_ACCESSORY_CLICK,
                        parameters={ACCESSORY_ITEM_PARAMETER: item},
                    ),
                ),
            )
            for item in ACCESSORY_ITEMS
        ],
    )

"""Command identifiers, card action names and fixed reply texts."""

# App command (slash command) identifiers as configured for the chat app.
CMD_PUBSUB_TEST = 1
CMD_CREATE_CARD = 2
CMD_UPDATE_CARD = 3
CMD_MULTI_SELECTION_CARD = 4
CMD_USER_SELECTION_CARD = 5
CMD_ACCESSORY_CARD = 6
CMD_SINGLE_SELECTION_CARD = 7

# Card click functions.
ACTION_CARD_CLICK = "onCardClick"
ACTION_UPDATE_MESSAGE = "onUpdateMessage"
ACTION_SUBMIT_SELECTION = "onSubmitSelection"
ACTION_ACCESSORY_CLICK = "onAccessoryClick"

# Parameter keys that older card revisions used to carry the action name.
ACTION_PARAMETER_KEYS = ("actionMethodName", "action", "actionName")

# Form input read by the selection submit action.
SELECTION_FIELD = "selection"
ACCESSORY_ITEM_PARAMETER = "item"

# Fields replaced when a card click updates the original message.
UPDATE_MESSAGE_FIELDS = frozenset({"text", "cards_v2"})

MESSAGE_REPLY_TEMPLATE = "Hello {sender}, you said: {text}"
EMPTY_TEXT_PLACEHOLDER = "(no text)"
WELCOME_TEXT = "Thanks for adding me to this space!"
PUBSUB_TEST_TEXT = "Slash command /pubsubtest invoked!"
UNKNOWN_COMMAND_TEXT = "Unknown slash command."
UNKNOWN_ACTION_TEXT = "Unknown card action: {action}"
BUTTON_CLICKED_TEXT = "Button clicked! (Action: {action})"
MESSAGE_UPDATED_TEXT = "Message updated!"
UPDATE_FAILED_TEXT = "Could not update the original message."
SELECTION_TEXT = "You selected: {values}"
SELECTION_EMPTY = "None"
ACCESSORY_CLICKED_TEXT = "Accessory button clicked for {item}"
ACCESSORY_UNKNOWN_ITEM = "unknown"
UNKNOWN_ACTION_ID = "unknown"

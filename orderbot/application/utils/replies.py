ASK_NAME = "Hi! What is your name?"
ASK_NAME_AGAIN = "Please send your name as a text message."
ASK_PHOTO = "Thanks! Now send a photo."
CHOOSE_MONTH = "Choose a month:"
CHOOSE_DAY = "Choose a day:"
CHOOSE_HOUR = "Choose an hour:"
CHOOSE_MINUTES = "Choose minutes:"

START_OVER = "Please start with the /start command."
USE_START = "That is not what I expected here. Send /start to begin again."

ORDER_SAVED = "Photo and order saved! Wait for confirmation."
ORDER_FAILED = "An error occurred while saving your order. Please try again."
GENERIC_FAILURE = "An error occurred. Please try again."

RESTARTING = "Restarting the bot..."
NOT_ALLOWED = "You are not allowed to use this command."

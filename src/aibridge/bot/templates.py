"""Static reply texts and keyboards."""

from aibridge.api.schemas.telegram import InlineKeyboardButton, InlineKeyboardMarkup

MARKDOWN = "Markdown"

SYSTEM_PROMPT = (
    "You are a helpful and friendly assistant. Provide concise, accurate, and engaging "
    "responses. Format your responses using Markdown for better readability. Use bullet "
    "points, bold, and italic text where appropriate."
)

WELCOME_TEMPLATE = """\
*Welcome, {first_name}!* 👋

I'm your AI assistant powered by Llama 3.3, ready to help with information, answer questions, or just chat.

*How to use me:*
• Simply type your question or message
• I'll respond with the best answer I can provide
• Use /help to see available commands

What would you like to talk about today?"""

HELP_TEXT = """\
*Available Commands:*

• /start - Start or restart our conversation
• /help - Show this help message
• /about - Learn about how I work

You can also just type any question or message, and I'll respond!"""

ABOUT_TEXT = """\
*About This Bot*

I'm powered by the Llama 3.3 70B AI model. I run completely in the cloud and can help answer questions on a wide range of topics.

*Technical Details:*
• Built as a stateless Telegram webhook
• Using Llama 3.3 70B model
• Responses formatted in Markdown"""

EXAMPLES_TEXT = """\
*Here are some things you can ask me:*

• "Explain quantum computing in simple terms"
• "What are some healthy breakfast ideas?"
• "Help me draft an email to request time off"
• "What are the key features of Python?"
• "Tell me a fun fact about space"

Just type your question and I'll do my best to help!"""

ASK_AGAIN_TEXT = "What would you like to know? I'm ready for your next question!"

UNKNOWN_COMMAND_TEXT = "I don't recognize that command. Type /help to see available commands."

APOLOGY_TEXT = "I'm having trouble thinking right now. Please try again in a moment."

START_KEYBOARD = InlineKeyboardMarkup(
    inline_keyboard=[
        [
            InlineKeyboardButton(text="🔍 Examples", callback_data="examples"),
            InlineKeyboardButton(text="ℹ️ About", callback_data="about"),
        ]
    ]
)

FOLLOW_UP_KEYBOARD = InlineKeyboardMarkup(
    inline_keyboard=[
        [
            InlineKeyboardButton(text="❓ Ask another question", callback_data="ask_again"),
            InlineKeyboardButton(text="ℹ️ Help", callback_data="help"),
        ]
    ]
)


def welcome_text(first_name: str) -> str:
    return WELCOME_TEMPLATE.format(first_name=first_name)

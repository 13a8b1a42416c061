"""Telegram constants for the log uploader."""

LOGS_COMMAND = "/logs"

# Characters reserved by Telegram MarkdownV2.
MARKDOWN_V2_RESERVED = "_*[]()~`>#+-=|{}.!"

CAPTION_TEMPLATE = (
    "🔧 *{service} LOGS*\n"
    "📅 Downloaded: {timestamp}\n"
    "🖥️ Server: {host}\n"
    "📦 File: {file_name}"
)

ACK_MESSAGE = "✅ Logs destination detected. Uploading {service} logs..."
FAILURE_MESSAGE = "❌ Failed to upload {service} logs: {error}"

DEFAULT_LISTEN_TIMEOUT_SECONDS = 600.0
# Long-polling window of a single getUpdates call.
POLL_TIMEOUT_SECONDS = 30

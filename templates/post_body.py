# post_body.py

PLACEHOLDER_BODY = (
    "Write the introduction of your post here.\n"
    "\n"
    "## First section\n"
    "\n"
    "Keep paragraphs short and link to sources with regular Markdown links.\n"
)

FILENAME_TEMPLATE = "{date}-{slug}.md"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"

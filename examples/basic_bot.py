import logging

from wajs import App
from wajs.app import filters
from wajs.infra.logger import get_logger

get_logger("wajs", logging.INFO)

app = App(session_name="basic-bot", headless=True)


@app.on_ready
async def ready(app):
    print(f"Bot is up and running as {app.client.info.me}.")


@app.message(filters.text & filters.private)
async def on_private_text(ctx):
    # Auto reply to ping
    if ctx.text.lower() == "ping":
        print(f"Received ping from {ctx.from_}, replying...")
        await ctx.reply("pong from wajs!")
        await ctx.react("🚀")


@app.command("/help")
async def help_command(ctx):
    await ctx.reply("Available commands:\n/help - Show this message\nping - Play ping pong")


if __name__ == "__main__":
    print("Starting wajs basic bot example...")
    app.run()

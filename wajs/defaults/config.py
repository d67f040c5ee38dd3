"""Default client options."""

WHATSAPP_WEB_URL = "https://web.whatsapp.com/"

WA_JS_URL = "https://github.com/wppconnect-team/wa-js/releases/latest/download/wppconnect-wa.js"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_CLIENT_OPTIONS = {
    "browser": "chromium",
    "headless": True,
    "launch_options": {},
    "args": [],
    "browser_ws": None,
    "session_name": None,
    "session_path": "./.wajs_auth",
    "user_agent": DEFAULT_USER_AGENT,
    "web_url": WHATSAPP_WEB_URL,
    "wa_js_url": WA_JS_URL,
    "wa_js_path": None,
    "init_scripts": [],
    "qr_max_retries": 0,
    "takeover_on_conflict": False,
    "takeover_timeout_ms": 0,
    "pairing_number": None,
    "ffmpeg_path": "ffmpeg",
    "event_queue_size": 1024,
    "invite_v4_delay_ms": 2500,
}

DEFAULT_BATCH_SLEEP_MS = (250, 500)

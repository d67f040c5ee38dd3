from __future__ import annotations

from typing import TYPE_CHECKING

from wajs.core.entities import MessageMedia

if TYPE_CHECKING:
    from wajs.client.client import Client

SET_STATUS = "async (status) => { await window.WPP.profile.setMyStatus(status); }"

SET_DISPLAY_NAME = "async (name) => await window.WPP.profile.setMyProfileName(name)"

SET_PROFILE_PICTURE = """async (media) => {
    const me = window.WPP.conn.getMyUserId();
    return await window.WAJS.setPicture(me._serialized, media);
}"""

DELETE_PROFILE_PICTURE = """async () => {
    const me = window.WPP.conn.getMyUserId();
    return await window.WPP.whatsapp.functions.requestDeletePicture(me);
}"""

AUTO_DOWNLOAD = """async ({ kind, flag }) => {
    const settings = window.Store.Settings;
    const current = settings['getAutoDownload' + kind]();
    if (current === flag) return flag;
    await settings['setAutoDownload' + kind](flag);
    return flag;
}"""

JOIN_WEB_BETA = "async (action) => await window.WPP.conn.joinWebBeta(action)"


class ProfileAPI:
    """Own account profile and local web settings."""

    def __init__(self, client: Client) -> None:
        self.client = client

    async def set_status(self, status: str) -> None:
        await self.client.bridge.execute(SET_STATUS, status)

    async def set_display_name(self, display_name: str) -> bool:
        result = await self.client.bridge.execute(SET_DISPLAY_NAME, display_name)
        return result is not False

    async def set_profile_picture(self, media: MessageMedia) -> bool:
        return bool(await self.client.bridge.execute(SET_PROFILE_PICTURE, media.to_remote()))

    async def delete_profile_picture(self) -> bool:
        return bool(await self.client.bridge.execute(DELETE_PROFILE_PICTURE))

    async def _set_auto_download(self, kind: str, flag: bool) -> bool:
        return bool(await self.client.bridge.execute(AUTO_DOWNLOAD, {"kind": kind, "flag": bool(flag)}))

    async def set_auto_download_audio(self, flag: bool) -> bool:
        return await self._set_auto_download("Audio", flag)

    async def set_auto_download_documents(self, flag: bool) -> bool:
        return await self._set_auto_download("Documents", flag)

    async def set_auto_download_photos(self, flag: bool) -> bool:
        return await self._set_auto_download("Photos", flag)

    async def set_auto_download_videos(self, flag: bool) -> bool:
        return await self._set_auto_download("Videos", flag)

    async def join_web_beta(self, action: bool) -> None:
        await self.client.bridge.execute(JOIN_WEB_BETA, bool(action))

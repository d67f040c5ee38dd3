from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Optional

from wajs.core.contact import Contact
from wajs.core.entities import CreateGroupResult, MembershipRequestResult, MessageMedia, ParticipantResult
from wajs.core.errors import BridgeError, ValidationError, is_server_status_error
from wajs.core.wid import serialize_wid
from wajs.defaults.config import DEFAULT_BATCH_SLEEP_MS
from wajs.utils.batch import SleepOption, batch_sleep_ms
from wajs.utils.versions import compare_wweb_versions

if TYPE_CHECKING:
    from wajs.client.client import Client

logger = logging.getLogger(__name__)

INVITE_V4_RESULT_CHANGED_IN = "2.2335.6"
INVITE_V4_ALLOWED_MARKER = "ParticipantRequestCodeCanBeSent"

ADD_PARTICIPANT_MESSAGES = {
    200: "The participant was added successfully",
    403: "The participant can be added by sending private invitation only",
    404: "The phone number is not registered on WhatsApp",
}
ADD_PARTICIPANT_DEFAULT = "An unknown error occupied while adding a participant"

CREATE_GROUP_ERROR = "CreateGroupError: An unknown error occupied while creating a group"

QUERY_EXISTS = """async (participantId) => {
    const result = await window.WPP.contact.queryExists(participantId);
    return result && result.wid ? result.wid._serialized : null;
}"""

SEND_CREATE_GROUP = """async ({ title, participants, messageTimer, parentGroupId }) => {
    const createWid = window.WPP.whatsapp.WidFactory.createWid;
    const result = await window.WPP.whatsapp.functions.sendCreateGroup(
        title,
        participants.map((p) => createWid(p)),
        messageTimer,
        parentGroupId ? createWid(parentGroupId) : undefined
    );
    return {
        gid: result.wid._serialized,
        participants: result.participants.map((p) => ({
            id: p.wid._serialized,
            error: p.error,
            type: p.type,
            inviteCode: p.invite_code,
            inviteCodeExp: p.invite_code_exp,
        })),
    };
}"""

SEND_GROUP_INVITE = """async ({ participantId, inviteCode, inviteCodeExp, groupId, comment }) => {
    await window.WPP.chat.sendGroupInviteMessage(participantId, {
        inviteCode, inviteCodeExpiration: inviteCodeExp, groupId, caption: comment
    });
    return true;
}"""

ADD_PARTICIPANT = """async ({ groupId, participantId }) => {
    const result = await window.WPP.group.addParticipants(groupId, [participantId]);
    const rpc = result[participantId] || {};
    return { code: rpc.code, message: rpc.message, inviteCode: rpc.invite_code, inviteCodeExp: rpc.invite_code_exp };
}"""

SEND_INVITE_V4_TO_PARTICIPANT = """async ({ groupId, participantId, inviteCode, inviteCodeExp, comment }) => {
    const groupWid = window.WPP.whatsapp.WidFactory.createWid(groupId);
    const pWid = window.WPP.whatsapp.WidFactory.createWid(participantId);
    const group = await window.WPP.whatsapp.ChatStore.find(groupWid);
    window.WPP.whatsapp.ContactStore.gadd(pWid, { silent: true });
    const userChat = await window.WPP.whatsapp.ChatStore.find(pWid);
    if (!userChat) return null;
    const res = await window.WPP.whatsapp.ChatModel.sendGroupInviteMessage(
        userChat,
        group.id._serialized,
        group.formattedTitle || group.name,
        inviteCode,
        inviteCodeExp,
        comment,
        await window.WAJS.getProfilePicThumbToBase64(groupWid)
    );
    return res && typeof res === 'object' ? { messageSendResult: res.messageSendResult } : res;
}"""

PARTICIPANTS_ACTION = "async ({ groupId, participantIds, action }) => await window.WPP.group[action](groupId, participantIds)"

GET_MEMBERSHIP_REQUESTS = """async (groupId) => {
    const requests = await window.WPP.group.getMembershipRequests(groupId);
    return requests.map((r) => ({
        id: r.id && r.id._serialized ? r.id._serialized : r.id,
        addedBy: r.addedBy && r.addedBy._serialized ? r.addedBy._serialized : r.addedBy,
        parentGroupId: r.parentGroupId && r.parentGroupId._serialized ? r.parentGroupId._serialized : null,
        requestMethod: r.requestMethod,
        t: r.t,
    }));
}"""

MEMBERSHIP_ACTION = """async ({ groupId, requesterId, approve }) => {
    const result = approve
        ? await window.WPP.group.approve(groupId, requesterId)
        : await window.WPP.group.reject(groupId, requesterId);
    const first = Array.isArray(result) ? result[0] : result;
    return { error: first && first.error ? first.error : null };
}"""

SET_SUBJECT = "async ({ groupId, value }) => { await window.WPP.group.setSubject(groupId, value); return true; }"

SET_DESCRIPTION = "async ({ groupId, value }) => { await window.WPP.group.setDescription(groupId, value); return true; }"

SET_PROPERTY = "async ({ groupId, property, value }) => { await window.WPP.group.setProperty(groupId, property, value); return true; }"

SET_PICTURE = "async ({ chatId, media }) => await window.WAJS.setPicture(chatId, media)"

DELETE_PICTURE = """async (chatId) => {
    const wid = window.WPP.whatsapp.WidFactory.createWid(chatId);
    return await window.WPP.whatsapp.functions.requestDeletePicture(wid);
}"""

GET_INVITE_CODE = "async (groupId) => await window.WPP.group.getInviteCode(groupId)"

REVOKE_INVITE = "async (groupId) => await window.WPP.group.revokeInviteCode(groupId)"

GET_INVITE_INFO = "async (code) => await window.WPP.group.getGroupInfoFromInviteCode(code)"

ACCEPT_INVITE = """async (code) => {
    const res = await window.WPP.group.join(code);
    return res.gid._serialized;
}"""

ACCEPT_INVITE_V4 = """async ({ inviteCode, inviteCodeExp, groupId, fromId }) => {
    const userWid = window.WPP.whatsapp.WidFactory.createWid(fromId);
    return await window.Store.JoinInviteV4.joinGroupViaInviteV4(inviteCode, String(inviteCodeExp), groupId, userWid);
}"""

LEAVE = "async (groupId) => await window.WPP.group.leave(groupId)"


def _as_id_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (str, Contact)):
        value = [value]
    return [item.id if isinstance(item, Contact) else str(item) for item in value]


def _membership_message(code: Optional[int], approve: bool) -> str:
    verb = "approved" if approve else "rejected"
    if code is None or code == 200:
        return f"The participant was {verb} successfully"
    if code == 403:
        return "The participant cannot be added to the group"
    if code == 404:
        return "The participant was not found in the membership requests list"
    action = "approving" if approve else "rejecting"
    return f"An unknown error occupied while {action} the participant membership request"


class GroupsAPI:
    """Group management. Batch loops run strictly one item at a time with an injected delay."""

    def __init__(
        self,
        client: Client,
        sleep_fn: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self.client = client
        self._sleep = sleep_fn
        self._rng = rng

    async def _pause_after(self, index: int, total: int, sleep: SleepOption) -> None:
        delay_ms = batch_sleep_ms(index, total, sleep, self._rng)
        if delay_ms > 0:
            await self._sleep(delay_ms / 1000)

    async def create_group(
        self,
        title: str,
        participants: Any = None,
        message_timer: int = 0,
        parent_group_id: str | None = None,
        auto_send_invite_v4: bool = True,
        comment: str = "",
    ) -> CreateGroupResult:
        bridge = self.client.bridge
        requested = _as_id_list(participants)
        valid: list[str] = []
        failed: list[str] = []
        for participant in requested:
            if await bridge.execute(QUERY_EXISTS, participant):
                valid.append(participant)
            else:
                failed.append(participant)

        try:
            created = await bridge.execute(
                SEND_CREATE_GROUP,
                {
                    "title": title,
                    "participants": valid,
                    "messageTimer": message_timer,
                    "parentGroupId": parent_group_id,
                },
            )
        except BridgeError as exc:
            logger.warning("group creation failed: %s", exc)
            return CreateGroupResult(ok=False, title=title, error=f"{CREATE_GROUP_ERROR} ({exc.name}: {exc.message})")

        gid = created.get("gid")
        results: dict[str, ParticipantResult] = {}
        invite_delay = float(self.client.options.get("invite_v4_delay_ms", 2500)) / 1000
        for participant in created.get("participants") or []:
            participant_id = participant.get("id")
            code = int(participant.get("error") or 200)
            sent = False
            if auto_send_invite_v4 and code == 403:
                await self._sleep(invite_delay)
                await bridge.execute(
                    SEND_GROUP_INVITE,
                    {
                        "participantId": participant_id,
                        "inviteCode": participant.get("inviteCode"),
                        "inviteCodeExp": participant.get("inviteCodeExp"),
                        "groupId": gid,
                        "comment": comment,
                    },
                )
                sent = True
            results[participant_id] = ParticipantResult(
                code=code,
                message=ADD_PARTICIPANT_MESSAGES.get(code, ADD_PARTICIPANT_DEFAULT),
                is_group_creator=participant.get("type") == "superadmin",
                is_invite_v4_sent=sent,
            )

        for participant_id in failed:
            results[participant_id] = ParticipantResult(code=404, message=ADD_PARTICIPANT_MESSAGES[404])

        return CreateGroupResult(ok=True, title=title, gid=gid, participants=results)

    async def add_participants(
        self,
        group_id: str,
        participant_ids: Any,
        auto_send_invite_v4: bool = True,
        comment: str = "",
        sleep: SleepOption = DEFAULT_BATCH_SLEEP_MS,
    ) -> dict[str, ParticipantResult]:
        ids = _as_id_list(participant_ids)
        if not ids:
            raise ValidationError("at least one participant id is required")

        results: dict[str, ParticipantResult] = {}
        for index, participant_id in enumerate(ids):
            rpc = await self.client.bridge.execute(ADD_PARTICIPANT, {"groupId": group_id, "participantId": participant_id}) or {}
            code = int(rpc.get("code") or 200)
            message = rpc.get("message") or ADD_PARTICIPANT_MESSAGES.get(code, ADD_PARTICIPANT_DEFAULT)
            sent = False
            if auto_send_invite_v4 and code == 403 and INVITE_V4_ALLOWED_MARKER in message:
                sent = await self._send_invite_v4(group_id, participant_id, rpc, comment)
            results[participant_id] = ParticipantResult(code=code, message=message, is_invite_v4_sent=sent)
            await self._pause_after(index, len(ids), sleep)
        return results

    async def _send_invite_v4(self, group_id: str, participant_id: str, rpc: dict[str, Any], comment: str) -> bool:
        res = await self.client.bridge.execute(
            SEND_INVITE_V4_TO_PARTICIPANT,
            {
                "groupId": group_id,
                "participantId": participant_id,
                "inviteCode": rpc.get("inviteCode"),
                "inviteCodeExp": rpc.get("inviteCodeExp"),
                "comment": comment,
            },
        )
        if res is None:
            return False
        version = await self.client.get_wweb_version()
        if compare_wweb_versions(version, "<", INVITE_V4_RESULT_CHANGED_IN):
            return res == "OK"
        return isinstance(res, dict) and res.get("messageSendResult") == "OK"

    async def _participants_action(self, group_id: str, participant_ids: Any, action: str) -> Any:
        return await self.client.bridge.execute(
            PARTICIPANTS_ACTION,
            {"groupId": group_id, "participantIds": _as_id_list(participant_ids), "action": action},
        )

    async def remove_participants(self, group_id: str, participant_ids: Any) -> Any:
        return await self._participants_action(group_id, participant_ids, "removeParticipants")

    async def promote_participants(self, group_id: str, participant_ids: Any) -> Any:
        return await self._participants_action(group_id, participant_ids, "promoteParticipants")

    async def demote_participants(self, group_id: str, participant_ids: Any) -> Any:
        return await self._participants_action(group_id, participant_ids, "demoteParticipants")

    async def get_membership_requests(self, group_id: str) -> list[dict[str, Any]]:
        return await self.client.bridge.execute(GET_MEMBERSHIP_REQUESTS, group_id) or []

    async def _membership_action(
        self,
        group_id: str,
        requester_ids: Any,
        sleep: SleepOption,
        approve: bool,
    ) -> list[MembershipRequestResult]:
        if requester_ids is None:
            requests = await self.get_membership_requests(group_id)
            ids = [serialize_wid(r.get("id")) for r in requests if r.get("id")]
        else:
            ids = _as_id_list(requester_ids)

        results: list[MembershipRequestResult] = []
        for index, requester_id in enumerate(ids):
            res = await self.client.bridge.execute(
                MEMBERSHIP_ACTION,
                {"groupId": group_id, "requesterId": requester_id, "approve": approve},
            ) or {}
            error = res.get("error")
            code = int(error) if error is not None else None
            results.append(
                MembershipRequestResult(
                    requester_id=requester_id,
                    error=code,
                    message=_membership_message(code, approve),
                )
            )
            await self._pause_after(index, len(ids), sleep)
        return results

    async def approve_membership_requests(
        self,
        group_id: str,
        requester_ids: Any = None,
        sleep: SleepOption = DEFAULT_BATCH_SLEEP_MS,
    ) -> list[MembershipRequestResult]:
        return await self._membership_action(group_id, requester_ids, sleep, approve=True)

    async def reject_membership_requests(
        self,
        group_id: str,
        requester_ids: Any = None,
        sleep: SleepOption = DEFAULT_BATCH_SLEEP_MS,
    ) -> list[MembershipRequestResult]:
        return await self._membership_action(group_id, requester_ids, sleep, approve=False)

    async def _guarded(self, script: str, arg: Any) -> bool:
        """Runs a settings change; a server status rejection becomes ``False``."""
        try:
            result = await self.client.bridge.execute(script, arg)
        except BridgeError as exc:
            if is_server_status_error(exc):
                logger.info("group setting rejected by server: %s", exc.message)
                return False
            raise
        return result is not False

    async def set_subject(self, group_id: str, subject: str) -> bool:
        return await self._guarded(SET_SUBJECT, {"groupId": group_id, "value": subject})

    async def set_description(self, group_id: str, description: str) -> bool:
        return await self._guarded(SET_DESCRIPTION, {"groupId": group_id, "value": description})

    async def set_messages_admins_only(self, group_id: str, admins_only: bool = True) -> bool:
        return await self._guarded(SET_PROPERTY, {"groupId": group_id, "property": "announcement", "value": 1 if admins_only else 0})

    async def set_info_admins_only(self, group_id: str, admins_only: bool = True) -> bool:
        return await self._guarded(SET_PROPERTY, {"groupId": group_id, "property": "restrict", "value": 1 if admins_only else 0})

    async def set_picture(self, group_id: str, media: MessageMedia) -> bool:
        return await self._guarded(SET_PICTURE, {"chatId": group_id, "media": media.to_remote()})

    async def delete_picture(self, group_id: str) -> bool:
        return bool(await self.client.bridge.execute(DELETE_PICTURE, group_id))

    async def get_invite_code(self, group_id: str) -> str:
        return await self.client.bridge.execute(GET_INVITE_CODE, group_id)

    async def revoke_invite(self, group_id: str) -> str:
        return await self.client.bridge.execute(REVOKE_INVITE, group_id)

    async def get_invite_info(self, invite_code: str) -> dict[str, Any]:
        return await self.client.bridge.execute(GET_INVITE_INFO, invite_code)

    async def accept_invite(self, invite_code: str) -> str:
        return await self.client.bridge.execute(ACCEPT_INVITE, invite_code)

    async def accept_group_v4_invite(self, invite_info: dict[str, Any] | None) -> Any:
        if not invite_info or not invite_info.get("invite_code"):
            raise ValidationError("Invalid invite code, try passing the message.invite_v4 object")
        if invite_info.get("invite_code_exp") == 0:
            raise ValidationError("Expired invite code")
        return await self.client.bridge.execute(
            ACCEPT_INVITE_V4,
            {
                "inviteCode": invite_info["invite_code"],
                "inviteCodeExp": invite_info.get("invite_code_exp"),
                "groupId": invite_info.get("group_id"),
                "fromId": invite_info.get("from_id"),
            },
        )

    async def leave(self, group_id: str) -> None:
        await self.client.bridge.execute(LEAVE, group_id)

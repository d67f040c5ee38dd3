"""JavaScript sources evaluated in the page.

Each constant is a function expression; the bridge calls it with one argument.
"""

IS_REGISTERED = "() => window.WPP.conn.isRegistered()"

WAIT_REGISTERED = "() => window.WPP.conn.isRegistered()"

STREAM_INFO = "() => (window.WPP && window.WPP.whatsapp && window.WPP.whatsapp.Stream) ? window.WPP.whatsapp.Stream.displayInfo : null"

REGISTER_AUTH_CODE_LISTENER = """() => {
    window.WPP.on('conn.auth_code_change', (auth) => {
        window.onAuthCodeChangeEvent(auth ? { fullCode: auth.fullCode } : null);
    });
}"""

GEN_LINK_DEVICE_CODE = "async (number) => await window.WPP.conn.genLinkDeviceCodeForPhoneNumber(number)"

REGISTER_STORE_LISTENERS = """() => {
    const model = (msg) => window.WAJS.getMessageModel(msg);
    const Store = window.WPP.whatsapp;

    window.WPP.on('conn.main_loaded', () => {
        const info = window.WPP.conn.getHistorySyncProgress();
        window.onMainLoadedEvent({ inProgress: !!info.inProgress, progress: info.progress });
    });
    window.WPP.on('conn.main_ready', () => window.onMainReadyEvent());

    Store.MsgStore.on('change', (msg) => { window.onChangeMessageEvent(model(msg)); });
    Store.MsgStore.on('change:type', (msg) => { window.onChangeMessageTypeEvent(model(msg)); });
    Store.MsgStore.on('change:ack', (msg, ack) => { window.onMessageAckEvent(model(msg), ack); });
    Store.MsgStore.on('change:isUnsentMedia', (msg, unsent) => {
        if (msg.id.fromMe && !unsent) window.onMessageMediaUploadedEvent(model(msg));
    });
    Store.MsgStore.on('remove', (msg) => { if (msg.isNewMsg) window.onRemoveMessageEvent(model(msg)); });
    Store.MsgStore.on('change:body change:caption', (msg, newBody, prevBody) => {
        window.onEditMessageEvent(model(msg), newBody, prevBody);
    });
    Store.Socket.on('change:state', (_appState, state) => { window.onAppStateChangedEvent(state); });
    Store.CallStore.on('add', (call) => { window.onIncomingCall(call.serialize ? call.serialize() : call); });
    Store.ChatStore.on('remove', async (chat) => { window.onRemoveChatEvent(await window.WAJS.getChatModel(chat)); });
    Store.ChatStore.on('change:archive', async (chat, curr, prev) => {
        window.onArchiveChatEvent(await window.WAJS.getChatModel(chat), curr, prev);
    });
    Store.ChatStore.on('change:unreadCount', async (chat) => {
        window.onChatUnreadCountEvent(await window.WAJS.getChatModel(chat));
    });
    window.WPP.on('chat.new_message', (msg) => {
        if (!msg.isNewMsg) return;
        if (msg.type === 'ciphertext') {
            msg.once('change:type', (resolved) => window.onAddMessageEvent(model(resolved)));
            window.onMessageCiphertextEvent(model(msg));
        } else {
            window.onAddMessageEvent(model(msg));
        }
    });
    window.WPP.on('chat.new_reaction', (reaction) => { window.onReaction([reaction]); });
}"""

REGISTER_LOGOUT_LISTENER = """() => {
    window.WPP.whatsapp.Cmd.on('logout', () => window.onLogoutEvent());
}"""

CLIENT_INFO = """() => ({
    pushname: window.WPP.whatsapp.Conn.pushname,
    platform: window.WPP.whatsapp.Conn.platform,
    wid: window.WPP.whatsapp.UserPrefs.getMeUser(),
})"""

WWEB_VERSION = "() => window.Debug.VERSION"

TAKEOVER = "() => window.WPP.whatsapp.Socket.takeover()"

GET_STATE = "() => window.WPP.whatsapp.Socket.state"

LOGOUT = "async () => await window.WPP.conn.logout()"

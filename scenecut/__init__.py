# scenecut: in-character scene transitions for a chat host.

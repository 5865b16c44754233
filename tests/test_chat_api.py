import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from estate_fastapi.core.constants import (APOLOGY_MESSAGES, ASSISTANT_NAMES,
                                           LIVE_SUPPORT_MESSAGES,
                                           LIVE_SUPPORT_TOKEN)
from estate_fastapi.crud.chat import message_crud
from estate_fastapi.models.chat import ChatSession, ChatStatus, MessageSender
from estate_fastapi.services.responder import ResponderError
from tests.test_constants import (TEST_BOT_REPLY, TEST_HANDOFF_REPLY,
                                  TEST_OPERATOR_REPLY, TEST_VISITOR)


async def _history(async_client, session_id):
    response = await async_client.get(
        '/chat/history', params={'session_id': session_id}
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.mark.asyncio
async def test_start_chat(async_client):
    response = await async_client.post('/chat/start', json=TEST_VISITOR)

    assert response.status_code == 201, response.text
    data = response.json()
    assert data['status'] == 'bot'
    assert data['user_name'] == TEST_VISITOR['name']
    assert data['user_email'] == TEST_VISITOR['email']
    assert data['admin_typing'] is False
    assert len(data['messages']) == 1
    welcome = data['messages'][0]
    assert welcome['sender'] == 'bot'
    assert welcome['sender_name'] == ASSISTANT_NAMES['tr']
    assert TEST_VISITOR['name'] in welcome['text']


@pytest.mark.asyncio
async def test_start_chat_english_welcome(async_client):
    payload = {**TEST_VISITOR, 'locale': 'en-US'}
    response = await async_client.post('/chat/start', json=payload)

    assert response.status_code == 201, response.text
    data = response.json()
    assert data['locale'] == 'en'
    assert data['messages'][0]['text'].startswith('Hello')
    assert data['messages'][0]['sender_name'] == ASSISTANT_NAMES['en']


@pytest.mark.asyncio
async def test_start_chat_requires_contact(async_client):
    payload = {**TEST_VISITOR, 'email': 'not-an-email'}
    response = await async_client.post('/chat/start', json=payload)
    assert response.status_code == 422

    payload = {k: v for k, v in TEST_VISITOR.items() if k != 'phone'}
    response = await async_client.post('/chat/start', json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_bot_reply(async_client, created_chat, fake_responder):
    response = await async_client.post(
        '/chat/message',
        json={'session_id': created_chat.id, 'message': 'merhaba'},
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data['status'] == 'replied'
    assert data['session_status'] == 'bot'
    assert data['message']['sender'] == 'bot'
    assert data['message']['content'] == TEST_BOT_REPLY
    assert data['message']['property'] is None

    fake_responder.reply.assert_awaited_once()
    history, text, locale = fake_responder.reply.await_args.args
    assert text == 'merhaba'
    assert locale == 'tr'
    # only the welcome message, the current turn is passed separately
    assert [turn.role for turn in history] == ['model']

    messages = (await _history(async_client, created_chat.id))['messages']
    assert [m['sender'] for m in messages] == ['bot', 'user', 'bot']
    assert messages[1]['content'] == 'merhaba'


@pytest.mark.asyncio
async def test_history_window_is_bounded(
    async_client, created_chat, fake_responder, test_session: AsyncSession
):
    for index in range(25):
        await message_crud.append(
            test_session, created_chat.id, f'mesaj {index}', MessageSender.USER
        )

    response = await async_client.post(
        '/chat/message',
        json={'session_id': created_chat.id, 'message': 'son mesaj'},
    )
    assert response.status_code == 200, response.text

    history = fake_responder.reply.await_args.args[0]
    assert len(history) == 20
    assert history[-1].text == 'mesaj 24'
    assert all(turn.text != 'son mesaj' for turn in history)


@pytest.mark.asyncio
async def test_handoff_to_live_support(
    async_client, created_chat, fake_responder
):
    fake_responder.reply.return_value = TEST_HANDOFF_REPLY

    response = await async_client.post(
        '/chat/message',
        json={
            'session_id': created_chat.id,
            'message': 'canlı destek ile görüşmek istiyorum',
        },
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data['session_status'] == 'live_waiting'
    assert data['message']['sender'] == 'bot'
    assert data['message']['content'] == LIVE_SUPPORT_MESSAGES['tr']

    history = await _history(async_client, created_chat.id)
    assert history['status'] == 'live_waiting'
    assert all(
        LIVE_SUPPORT_TOKEN not in m['content'] for m in history['messages']
    )


@pytest.mark.asyncio
async def test_handoff_marks_session_unread(
    async_client, created_chat, fake_responder, test_session: AsyncSession
):
    fake_responder.reply.return_value = (
        f'Tabii, sizi aktarıyorum. {LIVE_SUPPORT_TOKEN}'
    )

    await async_client.post(
        '/chat/message',
        json={'session_id': created_chat.id, 'message': 'yetkili lütfen'},
    )

    await test_session.refresh(created_chat)
    assert created_chat.status == 'live_waiting'
    assert created_chat.is_read is False


@pytest.mark.asyncio
@pytest.mark.parametrize('status', ['live_waiting', 'live_active'])
async def test_live_session_skips_responder(
    async_client, created_chat, fake_responder, test_session, status
):
    created_chat.status = ChatStatus(status)
    created_chat.is_read = True
    await test_session.commit()

    response = await async_client.post(
        '/chat/message',
        json={'session_id': created_chat.id, 'message': 'orada mısınız?'},
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data['status'] == 'sent_to_live'
    assert data['session_status'] == status
    assert data['message'] is None
    fake_responder.reply.assert_not_awaited()

    await test_session.refresh(created_chat)
    assert created_chat.is_read is False
    messages = (await _history(async_client, created_chat.id))['messages']
    assert messages[-1]['sender'] == 'user'
    assert messages[-1]['content'] == 'orada mısınız?'


@pytest.mark.asyncio
async def test_responder_failure_keeps_visitor_message(
    async_client, created_chat, fake_responder
):
    fake_responder.reply.side_effect = ResponderError('timeout')

    response = await async_client.post(
        '/chat/message',
        json={'session_id': created_chat.id, 'message': 'fiyat nedir?'},
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data['status'] == 'replied'
    assert data['session_status'] == 'bot'
    assert data['message']['content'] == APOLOGY_MESSAGES['tr']

    messages = (await _history(async_client, created_chat.id))['messages']
    assert [m['content'] for m in messages[1:]] == [
        'fiyat nedir?',
        APOLOGY_MESSAGES['tr'],
    ]


@pytest.mark.asyncio
async def test_message_unknown_session(async_client, fake_responder):
    response = await async_client.post(
        '/chat/message',
        json={'session_id': 'missing', 'message': 'merhaba'},
    )

    assert response.status_code == 404
    assert response.json()['detail'] == 'Session not found'
    fake_responder.reply.assert_not_awaited()


@pytest.mark.asyncio
async def test_blank_message_rejected(async_client, created_chat):
    response = await async_client.post(
        '/chat/message',
        json={'session_id': created_chat.id, 'message': '   '},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_history_polling_is_idempotent(
    async_client, created_chat: ChatSession
):
    await async_client.post(
        '/chat/message',
        json={'session_id': created_chat.id, 'message': 'merhaba'},
    )

    first = await _history(async_client, created_chat.id)
    second = await _history(async_client, created_chat.id)

    assert first == second
    ids = [m['id'] for m in first['messages']]
    assert ids == sorted(ids)


@pytest.mark.asyncio
async def test_history_after_id(async_client, created_chat):
    await async_client.post(
        '/chat/message',
        json={'session_id': created_chat.id, 'message': 'merhaba'},
    )
    full = await _history(async_client, created_chat.id)
    first_id = full['messages'][0]['id']

    response = await async_client.get(
        '/chat/history',
        params={'session_id': created_chat.id, 'after_id': first_id},
    )

    assert response.status_code == 200, response.text
    assert response.json()['messages'] == full['messages'][1:]


@pytest.mark.asyncio
async def test_history_unknown_session(async_client):
    response = await async_client.get(
        '/chat/history', params={'session_id': 'missing'}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_end_chat_resets_to_bot(
    async_client, created_chat, fake_responder, test_session
):
    created_chat.status = ChatStatus.LIVE_ACTIVE
    created_chat.admin_typing = True
    await test_session.commit()

    response = await async_client.post(
        '/chat/end', json={'session_id': created_chat.id}
    )
    assert response.status_code == 200, response.text
    assert response.json() == {'success': True}

    history = await _history(async_client, created_chat.id)
    assert history['status'] == 'bot'
    assert history['admin_typing'] is False

    response = await async_client.post(
        '/chat/message',
        json={'session_id': created_chat.id, 'message': 'tekrar merhaba'},
    )
    assert response.json()['status'] == 'replied'
    fake_responder.reply.assert_awaited_once()


@pytest.mark.asyncio
async def test_end_chat_unknown_session(async_client):
    response = await async_client.post(
        '/chat/end', json={'session_id': 'missing'}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_full_support_scenario(async_client, fake_responder):
    response = await async_client.post('/chat/start', json=TEST_VISITOR)
    session_id = response.json()['id']

    response = await async_client.post(
        '/chat/message',
        json={'session_id': session_id, 'message': 'merhaba'},
    )
    assert response.json()['session_status'] == 'bot'
    assert response.json()['message']['sender'] == 'bot'

    fake_responder.reply.return_value = TEST_HANDOFF_REPLY
    response = await async_client.post(
        '/chat/message',
        json={
            'session_id': session_id,
            'message': 'canlı destek ile görüşmek istiyorum',
        },
    )
    assert response.json()['session_status'] == 'live_waiting'

    chats = (await async_client.get('/admin/chats')).json()
    assert [chat['id'] for chat in chats] == [session_id]
    assert chats[0]['is_read'] is False

    response = await async_client.post(
        '/admin/chats/reply',
        json={'session_id': session_id, 'message': TEST_OPERATOR_REPLY},
    )
    assert response.status_code == 200, response.text
    assert response.json()['sender'] == 'operator'

    history = await _history(async_client, session_id)
    assert history['status'] == 'live_active'
    assert history['messages'][-1]['content'] == TEST_OPERATOR_REPLY

    response = await async_client.post(
        '/chat/end', json={'session_id': session_id}
    )
    assert response.status_code == 200
    history = await _history(async_client, session_id)
    assert history['status'] == 'bot'
    assert fake_responder.reply.await_count == 2

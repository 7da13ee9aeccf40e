import json

import httpx
import pytest

from tokenizer_client.client import TokenizerClient
from tokenizer_client.domain.models.errors import ObjectStoreError, TokenizerApiError
from tokenizer_client.domain.models.tokenization import ClientConfig, RequestOptions
from tokenizer_client.infrastructure.storage.signed_url import SignedUrlObjectStore
from tokenizer_client.infrastructure.tokenizer.api import HttpTokenizerApi


class FakeService:
    """Tokenizer service plus object storage behind one httpx.MockTransport."""

    def __init__(self, send_session_hash=True):
        self.requests = []
        self.objects = {}
        self.metadata = {}
        self.send_session_hash = send_session_hash

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        if request.url.host == 'store.example.com':
            if request.method == 'PUT':
                self.objects[url] = request.content
                return httpx.Response(200)
            if url not in self.objects:
                return httpx.Response(404, text='<Error>NoSuchKey</Error>')
            return httpx.Response(200, content=self.objects[url])

        body = json.loads(request.content or b'{}')
        path = request.url.path
        if path == '/api/tokenize':
            token_id = f"tok_{len(self.metadata) + 1}"
            self.metadata[token_id] = body['metadata']
            return httpx.Response(200, json={'success': True, 'data': {
                'tokenId': token_id,
                'uploadUrl': f"https://store.example.com/{token_id}",
                'headers': {'x-amz-meta': 'u'},
            }})
        if path == '/api/detokenize':
            token_id = body['tokenId']
            if token_id not in self.metadata:
                return httpx.Response(404, json={'success': False, 'error': {
                    'name': 'tokenNotFound', 'message': f"unknown token {token_id}",
                }})
            headers = {'x-session-hash': 'bound-1'} if self.send_session_hash else {}
            return httpx.Response(200, headers=headers, json={'success': True, 'data': {
                'downloadUrl': f"https://store.example.com/{token_id}",
                'headers': {},
            }})
        if path == '/api/metadata/get':
            return httpx.Response(200, json={'success': True, 'data': {'metadata': self.metadata[body['tokenId']]}})
        if path == '/api/grant/set':
            return httpx.Response(200, json={'success': True})
        if path == '/api/grant/verify':
            return httpx.Response(200, json={'success': True, 'data': {'valid': False}})
        return httpx.Response(500, text='internal error')


@pytest.fixture
def service():
    return FakeService()


def _client(service, config=None):
    http = httpx.AsyncClient(transport=httpx.MockTransport(service))
    config = config or {'host': 'https://tokenizer.example.com', 'baseRoute': '/api', 'authenticationToken': 'jwt'}
    base_path = ClientConfig.merged(config).base_path
    return TokenizerClient(
        config,
        api=HttpTokenizerApi(base_path, client=http),
        object_store=SignedUrlObjectStore(client=http),
    )


@pytest.mark.asyncio
async def test_round_trip_over_http(service):
    client = _client(service)

    tokenized = await client.tokenize('hello', {'type': 'text'})
    assert tokenized.success is True
    assert tokenized.token_id == 'tok_1'
    assert service.objects['https://store.example.com/tok_1'] == b'hello'

    result = await client.detokenize('tok_1')
    assert result.success is True
    assert result.value == b'hello'

    # Descriptor call precedes every transfer
    methods = [(r.method, r.url.host) for r in service.requests]
    assert methods == [
        ('POST', 'tokenizer.example.com'),
        ('PUT', 'store.example.com'),
        ('POST', 'tokenizer.example.com'),
        ('GET', 'store.example.com'),
    ]


@pytest.mark.asyncio
async def test_request_headers_and_session_binding(service):
    client = _client(service)
    await client.tokenize(b'v', {})
    await client.detokenize_to_url('tok_1')
    await client.get_metadata('tok_1')

    first, _, detok, meta = service.requests
    assert first.headers['content-type'] == 'application/json'
    assert first.headers['authorization'] == 'jwt'
    assert 'x-session-hash' not in first.headers
    assert 'x-session-hash' not in detok.headers
    assert meta.headers['x-session-hash'] == 'bound-1'


@pytest.mark.asyncio
async def test_missing_binding_over_http():
    service = FakeService(send_session_hash=False)
    client = _client(service)
    await client.tokenize(b'v', {})

    result = await client.detokenize('tok_1')

    assert result.success is False
    assert result.error.name == 'detokenizationiFrameSessionBinding'
    assert [r.method for r in service.requests] == ['POST', 'PUT', 'POST']


@pytest.mark.asyncio
async def test_structured_error_document(service):
    client = _client(service)

    result = await client.detokenize_to_url('tok_missing')

    assert result.success is False
    assert result.error.name == 'tokenNotFound'
    assert result.error.message == 'unknown token tok_missing'
    assert result.error.code == '404'


@pytest.mark.asyncio
async def test_grants_over_http(service):
    client = _client(service)

    granted = await client.create_full_access_grant('s', 'tok_1')
    verified = await client.verify_grant('s', 'tok_1')

    assert granted.success is True
    assert verified.success is True
    assert verified.valid is False
    assert json.loads(service.requests[0].content) == {'sessionId': 's', 'tokenId': 'tok_1'}


@pytest.mark.asyncio
async def test_api_raises_on_error_without_json():
    def handler(request):
        return httpx.Response(503, text='unavailable')

    api = HttpTokenizerApi('https://t.example.com/', client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    with pytest.raises(TokenizerApiError) as excinfo:
        await api.tokenize({'metadata': {}}, RequestOptions())
    assert excinfo.value.status == 503
    assert excinfo.value.error is None


@pytest.mark.asyncio
async def test_api_posts_to_base_path_route():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json={'success': True, 'data': {'valid': True}})

    api = HttpTokenizerApi('https://t.example.com/tok/', client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    response = await api.verify_grant({'sessionId': 's', 'tokenId': 't'}, RequestOptions(headers={'x-a': '1'}))

    assert seen == ['https://t.example.com/tok/grant/verify']
    assert response.data == {'valid': True}
    assert response.success is True


@pytest.mark.asyncio
async def test_object_store_errors():
    def handler(request):
        return httpx.Response(403, text='<Error>AccessDenied</Error>')

    store = SignedUrlObjectStore(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    with pytest.raises(ObjectStoreError) as excinfo:
        await store.upload('https://store.example.com/k', {}, b'x')
    assert excinfo.value.status == 403

    with pytest.raises(ObjectStoreError):
        await store.download('https://store.example.com/k', {})


@pytest.mark.asyncio
async def test_download_failure_surfaces_as_result(service):
    client = _client(service)
    await client.tokenize(b'v', {})
    service.objects.clear()

    result = await client.detokenize('tok_1')

    assert result.success is False
    assert result.error.name == 'ObjectStoreError'
    assert result.error.code == '404'


@pytest.mark.asyncio
async def test_owned_clients_closed():
    async with TokenizerClient({'host': 'https://t.example.com'}) as client:
        assert client.base_path == 'https://t.example.com'
    assert client._api._client.is_closed
    assert client._store._client.is_closed

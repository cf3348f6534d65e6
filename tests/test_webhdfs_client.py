"""Unit tests for WebHdfsClient."""

import pytest
import httpx

from backing.webhdfs_client import WebHdfsClient
from common.types import BlockLocationRecord
from overlay.exceptions import BackingStoreError, PathExistsError, PathNotFoundError

BASE_URL = 'http://nn:9870'

FILE_STATUS = {
    'accessTime': 1700000000001,
    'blockSize': 134217728,
    'group': 'supergroup',
    'length': 24930,
    'modificationTime': 1700000000000,
    'owner': 'hdfs',
    'pathSuffix': '',
    'permission': '644',
    'replication': 3,
    'type': 'FILE',
}


def _client(handler, user='hdfs'):
    client = WebHdfsClient(BASE_URL, user=user)
    client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return client


def _not_found(request):
    return httpx.Response(404, json={
        'RemoteException': {
            'exception': 'FileNotFoundException',
            'javaClassName': 'java.io.FileNotFoundException',
            'message': 'File does not exist: /missing',
        }
    })


def test_stat_maps_file_status():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={'FileStatus': FILE_STATUS})

    status = _client(handler).stat('/data/a.csv')

    assert requests[0].url.path == '/webhdfs/v1/data/a.csv'
    assert requests[0].url.params['op'] == 'GETFILESTATUS'
    assert requests[0].url.params['user.name'] == 'hdfs'
    assert status.path == '/data/a.csv'
    assert status.length == 24930
    assert not status.is_directory
    assert status.replication == 3
    assert status.block_size == 134217728
    assert status.access_time == 1700000000001
    assert status.owner == 'hdfs'


def test_user_name_omitted_without_user():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={'FileStatus': FILE_STATUS})

    _client(handler, user=None).stat('/data/a.csv')

    assert 'user.name' not in requests[0].url.params


def test_stat_missing_file_raises_not_found():
    with pytest.raises(PathNotFoundError) as exc_info:
        _client(_not_found).stat('/missing')
    assert exc_info.value.status_code == 404
    assert 'File does not exist' in str(exc_info.value)


def test_list_keeps_namenode_order():
    def handler(request):
        assert request.url.params['op'] == 'LISTSTATUS'
        return httpx.Response(200, json={'FileStatuses': {'FileStatus': [
            dict(FILE_STATUS, pathSuffix='z.csv'),
            dict(FILE_STATUS, pathSuffix='a.csv'),
            dict(FILE_STATUS, pathSuffix='sub', type='DIRECTORY', length=0),
        ]}})

    statuses = _client(handler).list('/data')

    assert [s.path for s in statuses] == ['/data/z.csv', '/data/a.csv', '/data/sub']
    assert statuses[2].is_directory


def test_open_follows_redirect_and_streams_content():
    def handler(request):
        if request.url.host == 'nn':
            assert request.url.params['op'] == 'OPEN'
            return httpx.Response(307, headers={'Location': 'http://dn1:9864/webhdfs/v1/data/a.csv?op=OPEN'})
        return httpx.Response(200, content=b'a,b\n1,2\n')

    with _client(handler).open('/data/a.csv', 4096) as stream:
        assert stream.read() == b'a,b\n1,2\n'


def test_open_missing_file_raises():
    with pytest.raises(PathNotFoundError):
        _client(_not_found).open('/missing', 4096)


def test_create_uploads_on_close_via_datanode_redirect():
    requests = []

    def handler(request):
        requests.append(request)
        if request.url.host == 'nn':
            return httpx.Response(307, headers={'Location': 'http://dn1:9864/webhdfs/v1/tmp/staging/p?op=CREATE'})
        return httpx.Response(201)

    client = _client(handler)
    stream = client.create('/tmp/staging/p', '644', True, 4096, 2, 1048576)
    stream.write(b'payload')
    assert requests == []

    stream.close()

    assert len(requests) == 2
    params = requests[0].url.params
    assert params['op'] == 'CREATE'
    assert params['overwrite'] == 'true'
    assert params['permission'] == '644'
    assert params['replication'] == '2'
    assert params['blocksize'] == '1048576'
    assert requests[1].url.host == 'dn1'
    assert requests[1].content == b'payload'


def test_create_accepts_location_in_json_body():
    requests = []

    def handler(request):
        requests.append(request)
        if request.url.host == 'nn':
            return httpx.Response(200, json={'Location': 'http://dn2:9864/webhdfs/v1/x?op=CREATE'})
        return httpx.Response(201)

    stream = _client(handler).create('/tmp/staging/x', None, False, 4096, 3, None)
    stream.close()

    assert requests[1].url.host == 'dn2'
    assert 'permission' not in requests[0].url.params
    assert 'blocksize' not in requests[0].url.params


def test_create_existing_file_raises_on_close():
    def handler(request):
        return httpx.Response(403, json={'RemoteException': {
            'exception': 'FileAlreadyExistsException',
            'message': '/tmp/staging/x already exists',
        }})

    stream = _client(handler).create('/tmp/staging/x', None, False, 4096, 3, None)
    with pytest.raises(PathExistsError):
        stream.close()


def test_delete_sends_recursive_flag():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={'boolean': True})

    assert _client(handler).delete('/data/dir', True)
    assert requests[0].method == 'DELETE'
    assert requests[0].url.params['recursive'] == 'true'


def test_mkdir_and_rename():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={'boolean': request.url.params['op'] == 'MKDIRS'})

    client = _client(handler)

    assert client.mkdir('/data/new', '755')
    assert not client.rename('/data/a.csv', '/data/b.csv')
    assert requests[1].url.params['destination'] == '/data/b.csv'


def test_locate_maps_block_locations():
    def handler(request):
        assert request.url.params['offset'] == '0'
        assert request.url.params['length'] == '1'
        return httpx.Response(200, json={'BlockLocations': {'BlockLocation': [{
            'hosts': ['dn1', 'dn2'],
            'names': ['10.0.0.1:9866', '10.0.0.2:9866'],
            'offset': 0,
            'length': 134217728,
            'corrupt': False,
        }]}})

    records = _client(handler).locate('/data/a.csv', 0, 1)

    assert records == [BlockLocationRecord(
        names=('10.0.0.1:9866', '10.0.0.2:9866'),
        hosts=('dn1', 'dn2'),
        offset=0,
        length=134217728,
    )]


def test_error_without_remote_exception_body():
    client = _client(lambda request: httpx.Response(500, text='namenode down'))

    with pytest.raises(BackingStoreError) as exc_info:
        client.stat('/data/a.csv')
    assert exc_info.value.status_code == 500
    assert 'namenode down' in str(exc_info.value)


def test_connection_error_raises_backing_store_error():
    def handler(request):
        raise httpx.ConnectError("Connection refused")

    with pytest.raises(BackingStoreError):
        _client(handler).stat('/data/a.csv')

"""Best-effort artifact publishing."""

from opsdeploy.models import CookbookDescriptor
from opsdeploy.publisher import ArtifactPublisher


class BrokenStorage:
    def put_object(self, bucket, key, body):
        raise ConnectionError('connection reset by peer')


def make_cookbook():
    return CookbookDescriptor(
        bucket='chef-app', artifact_key='cookbooks/chef-app-dev.zip',
        fingerprint_key='cookbooks/chef-app-dev_SHA.txt', name='chef-app', path='./chef',
        local_fingerprint='7bfa19491170563f422a321c144800f4435323b1'
    )


def test_publish_uploads_artifact_and_fingerprint(tmp_path, storage, reporter, output):
    artifact = tmp_path / 'chef-app-dev.zip'
    artifact.write_bytes(b'PK\x05\x06' + b'\x00' * 18)
    cookbook = make_cookbook()

    assert ArtifactPublisher(storage, reporter).publish(cookbook, artifact) is True

    assert storage.get_object('chef-app', 'cookbooks/chef-app-dev.zip') == artifact.read_bytes()
    assert storage.get_text('chef-app', 'cookbooks/chef-app-dev_SHA.txt') == cookbook.local_fingerprint
    assert '[OK] Published cookbook [chef-app]' in output[0].getvalue()


def test_publish_failure_is_reported_not_raised(tmp_path, reporter, output):
    artifact = tmp_path / 'chef-app-dev.zip'
    artifact.write_bytes(b'zip')

    assert ArtifactPublisher(BrokenStorage(), reporter).publish(make_cookbook(), artifact) is False

    errors = output[1].getvalue()
    assert 'ERROR: Failed to publish cookbook [chef-app]' in errors
    assert 'connection reset by peer' in errors


def test_missing_artifact_is_a_publish_failure(tmp_path, storage, reporter, output):
    assert ArtifactPublisher(storage, reporter).publish(make_cookbook(), tmp_path / 'missing.zip') is False

    assert storage.get_object('chef-app', 'cookbooks/chef-app-dev_SHA.txt') is None
    assert 'ERROR:' in output[1].getvalue()

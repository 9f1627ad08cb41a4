import docker
import pytest


class FakeDockerApi:
    """Stands in for docker.APIClient and records what the services ask for."""

    def __init__(self):
        self.search_results = [{"name": "ubuntu"}]
        self.pull_chunks = [{"status": "Pulling from library/ubuntu"}, {"status": "Download complete"}]
        self.containers = {}
        self.searches = []
        self.pulled = []
        self.created = []
        self.started = []
        self.pings = 0

    def ping(self):
        self.pings += 1
        return True

    def search(self, term):
        self.searches.append(term)
        return self.search_results

    def pull(self, repository, tag=None, stream=False, decode=False):
        self.pulled.append((repository, tag))
        return iter(self.pull_chunks)

    def inspect_container(self, container):
        if container not in self.containers:
            raise docker.errors.NotFound(f"No such container: {container}")
        return self.containers[container]

    def create_host_config(self, **kwargs):
        return dict(kwargs)

    def create_container(self, image, command=None, name=None, host_config=None):
        self.created.append(
            {"image": image, "command": command, "name": name, "host_config": host_config}
        )
        return {"Id": f"{name}-id", "Warnings": []}

    def start(self, container):
        self.started.append(container)


@pytest.fixture
def docker_api():
    return FakeDockerApi()

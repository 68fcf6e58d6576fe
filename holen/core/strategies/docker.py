"""
Docker strategy — run a utility from a container image.

The image name is templated, pulled, and then ``docker run`` takes
over the process. Manifest flags shape the run:

    interactive   --interactive, plus --tty when stdin is a terminal
    mount_pwd     working directory mounted at /cwd and used as workdir
                  (on Linux, also run as the calling uid:gid)
    docker_conn   host docker socket mounted into the container
"""

from __future__ import annotations

import logging

from holen.adapters.base import StrategyContext
from holen.core.engine.templater import expand
from holen.core.errors import CommandFailed, CommandNotFound, ImagePullFailed, TemplateError
from holen.core.models.strategy import DockerData, StrategyKind
from holen.core.strategies.base import Strategy

logger = logging.getLogger(__name__)

DOCKER_SOCKET = "/var/run/docker.sock"
CONTAINER_WORKDIR = "/cwd"


class DockerStrategy(Strategy):
    kind = StrategyKind.DOCKER

    def __init__(self, context: StrategyContext, data: DockerData):
        super().__init__(context)
        self._data = data

    @property
    def data(self) -> DockerData:
        return self._data

    def image(self) -> str:
        """The concrete image reference for this machine."""
        temp = self.template_context(self._data.version, self._data.arch_map)
        logger.debug("templater: %r", temp)
        try:
            return expand(temp, self._data.image)
        except TemplateError as e:
            raise TemplateError(f"unable to template image name: {e}") from e

    def docker_args(self, image: str, args: list[str]) -> list[str]:
        """Arguments for ``docker`` (``run`` included) to start ``image``."""
        system = self.context.system
        docker_args = ["run", "--rm"]

        if self._data.interactive:
            docker_args.append("--interactive")
            if system.stdin_is_terminal():
                docker_args.append("--tty")

        if self._data.mount_pwd:
            docker_args += [
                "--volume", f"{system.cwd()}:{CONTAINER_WORKDIR}",
                "--workdir", CONTAINER_WORKDIR,
            ]
            if system.os() == "linux" and system.uid() >= 0:
                docker_args += ["--user", f"{system.uid()}:{system.gid()}"]

        if self._data.docker_conn:
            docker_args += ["--volume", f"{DOCKER_SOCKET}:{DOCKER_SOCKET}"]

        return [*docker_args, image, *args]

    def run(self, args: list[str]) -> None:
        image = self.image()

        try:
            self.context.downloader.pull_docker_image(image)
        except (CommandFailed, CommandNotFound) as e:
            raise ImagePullFailed(f"can't pull image {image}: {e}") from e

        logger.info("Running %s %s from %s", self._data.name, self._data.version, image)
        self.context.runner.exec_command("docker", self.docker_args(image, args))

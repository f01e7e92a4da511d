"""Exception types raised by swingline.

Library code raises these and never exits the process. The single place
that turns them into an exit code is `swingline.cli.main`.
"""


class SwinglineError(RuntimeError):
    """Base class for every fatal swingline error."""


class EnvironmentSetupError(SwinglineError):
    """The runtime environment cannot support rendering (context, FBO)."""


class ContextCreationError(EnvironmentSetupError):
    pass


class ContextVersionError(EnvironmentSetupError):
    def __init__(self, require: int, got: int):
        self.require = require
        self.got = got
        super().__init__(
            f'OpenGL context is too old (require {require // 100}.{require // 10 % 10}, '
            f'got {got // 100}.{got // 10 % 10})'
        )


class FramebufferIncompleteError(EnvironmentSetupError):
    pass


class ShaderBuildError(SwinglineError):
    """A shader program failed to compile or link.

    `program` names the program (e.g. 'voronoi', 'blit') and `log` holds
    the driver diagnostic text.
    """

    def __init__(self, program: str, log: str):
        self.program = program
        self.log = log
        super().__init__(f"shader program '{program}' failed to build: {log}")

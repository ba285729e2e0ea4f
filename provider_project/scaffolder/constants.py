"""Fixed values shared by the artifact generators."""

GENERATED_MARKER = '~~ Generated by projen. To modify, edit .projenrc.js and run "npx projen".'

# Telemetry and crash reporting are always off in generated projects.
CHECKPOINT_DISABLE = "1"
SEND_CRASH_REPORTS = False

# Pinned because newer releases break the jsii build of provider bindings.
TYPES_YARGS_VERSION = "17.0.13"

DEFAULT_RUNNER = "ubuntu-latest"
CUSTOM_RUNNER = ["custom", "linux", "custom-linux-medium"]

# jsii targets in publishing order; "go" is the one needing source fix-ups.
TARGETS = ("js", "python", "dotnet", "java", "go")
GO_RELEASE_JOB = "release_go"
GO_PACKAGE_JOB = "package-go"

SETUP_COPYWRITE_ACTION = "hashicorp/setup-copywrite@v1.1.2"
DEPRECATION_STEP_NAME = "Deprecate the package in package managers if needed"

NODE_ACTION = "actions/setup-node@v3"
CHECKOUT_ACTION = "actions/checkout@v3"

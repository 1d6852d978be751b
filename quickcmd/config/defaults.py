"""Built-in configuration, in the same camelCase shape as a user config file.

User overrides from ``.quickcmd/config.json`` are merged on top of this by id
(see ``quickcmd.config.provider``).
"""

_JS_LOCK_FILES = ["pnpm-lock.yaml", "yarn.lock", "bun.lockb", "bun.lock"]

BUILTIN_PROJECT_TYPES: list[dict] = [
    {
        "id": "nodejs",
        "displayName": "Node.js",
        "aliases": ["node", "javascript", "typescript"],
        "priority": 80,
        "detectionRules": [
            {"name": "package-json", "type": "file_exists", "target": "package.json", "weight": 100, "required": True},
            {"name": "tsconfig", "type": "file_exists", "target": "tsconfig.json", "weight": 20},
            {"name": "node-modules", "type": "directory_exists", "target": "node_modules", "weight": 10},
            {"name": "nvmrc", "type": "file_exists", "target": ".nvmrc", "weight": 10},
        ],
        "packageManagers": [
            {
                "id": "pnpm",
                "displayName": "pnpm",
                "detectionRules": [
                    {"name": "pnpm-lock", "type": "file_exists", "target": "pnpm-lock.yaml", "weight": 100},
                    {"name": "pnpm-workspace", "type": "file_exists", "target": "pnpm-workspace.yaml", "weight": 30},
                    {
                        "name": "package-manager-field",
                        "type": "file_content",
                        "target": "package.json",
                        "weight": 80,
                        "config": {"pattern": r'/"packageManager"\s*:\s*"pnpm@/'},
                    },
                ],
            },
            {
                "id": "yarn",
                "displayName": "Yarn",
                "detectionRules": [
                    {"name": "yarn-lock", "type": "file_exists", "target": "yarn.lock", "weight": 100},
                    {"name": "yarnrc", "type": "file_exists", "target": ".yarnrc.yml", "weight": 20},
                    {
                        "name": "package-manager-field",
                        "type": "file_content",
                        "target": "package.json",
                        "weight": 80,
                        "config": {"pattern": r'/"packageManager"\s*:\s*"yarn@/'},
                    },
                ],
            },
            {
                "id": "bun",
                "displayName": "Bun",
                "detectionRules": [
                    {"name": "bun-lockb", "type": "file_exists", "target": "bun.lockb", "weight": 100},
                    {"name": "bun-lock", "type": "file_exists", "target": "bun.lock", "weight": 100},
                    {
                        "name": "package-manager-field",
                        "type": "file_content",
                        "target": "package.json",
                        "weight": 80,
                        "config": {"pattern": r'/"packageManager"\s*:\s*"bun@/'},
                    },
                ],
            },
            {
                "id": "npm",
                "displayName": "npm",
                "detectionRules": [
                    {"name": "package-lock", "type": "file_exists", "target": "package-lock.json", "weight": 100},
                    {"name": "shrinkwrap", "type": "file_exists", "target": "npm-shrinkwrap.json", "weight": 100},
                    # Bare package.json defaults to npm unless another lock file claims it.
                    {
                        "name": "package-json-default",
                        "type": "file_exists",
                        "target": "package.json",
                        "weight": 10,
                        "config": {"excludeIfExists": _JS_LOCK_FILES},
                    },
                ],
            },
        ],
    },
    {
        "id": "python",
        "displayName": "Python",
        "aliases": ["py"],
        "priority": 70,
        "detectionRules": [
            {"name": "requirements-txt", "type": "file_exists", "target": "requirements.txt", "weight": 60},
            {"name": "pyproject-toml", "type": "file_exists", "target": "pyproject.toml", "weight": 60},
            {"name": "setup-py", "type": "file_exists", "target": "setup.py", "weight": 50},
            {"name": "pipfile", "type": "file_exists", "target": "Pipfile", "weight": 50},
            {"name": "environment-yml", "type": "file_exists", "target": "environment.yml", "weight": 40},
            {"name": "manage-py", "type": "file_exists", "target": "manage.py", "weight": 30},
            {"name": "setup-cfg", "type": "file_exists", "target": "setup.cfg", "weight": 20},
            {
                "name": "python-sources",
                "type": "custom",
                "target": "has_python_sources",
                "weight": 20,
                "config": {"customFunction": "has_python_sources"},
            },
        ],
        "packageManagers": [
            {
                "id": "pip",
                "displayName": "pip",
                "detectionRules": [
                    {"name": "requirements-txt", "type": "file_exists", "target": "requirements.txt", "weight": 100},
                    {"name": "requirements-dir", "type": "directory_exists", "target": "requirements", "weight": 30},
                    {"name": "setup-py", "type": "file_exists", "target": "setup.py", "weight": 30},
                ],
            },
            {
                "id": "poetry",
                "displayName": "Poetry",
                "detectionRules": [
                    {"name": "poetry-lock", "type": "file_exists", "target": "poetry.lock", "weight": 100},
                    {
                        "name": "tool-poetry",
                        "type": "file_content",
                        "target": "pyproject.toml",
                        "weight": 80,
                        "config": {"pattern": "[tool.poetry]"},
                    },
                ],
            },
            {
                "id": "pipenv",
                "displayName": "Pipenv",
                "detectionRules": [
                    {"name": "pipfile", "type": "file_exists", "target": "Pipfile", "weight": 100},
                    {"name": "pipfile-lock", "type": "file_exists", "target": "Pipfile.lock", "weight": 50},
                ],
            },
            {
                "id": "uv",
                "displayName": "uv",
                "detectionRules": [
                    {"name": "uv-lock", "type": "file_exists", "target": "uv.lock", "weight": 100},
                    {
                        "name": "tool-uv",
                        "type": "file_content",
                        "target": "pyproject.toml",
                        "weight": 60,
                        "config": {"pattern": "[tool.uv]"},
                    },
                ],
            },
            {
                "id": "conda",
                "displayName": "Conda",
                "detectionRules": [
                    {"name": "environment-yml", "type": "file_exists", "target": "environment.yml", "weight": 100},
                    {"name": "environment-yaml", "type": "file_exists", "target": "environment.yaml", "weight": 100},
                ],
            },
        ],
    },
    {
        "id": "rust",
        "displayName": "Rust",
        "priority": 70,
        "detectionRules": [
            {"name": "cargo-toml", "type": "file_exists", "target": "Cargo.toml", "weight": 100, "required": True},
            {"name": "cargo-lock", "type": "file_exists", "target": "Cargo.lock", "weight": 20},
            {"name": "src-dir", "type": "directory_exists", "target": "src", "weight": 10},
        ],
        "packageManagers": [
            {
                "id": "cargo",
                "displayName": "Cargo",
                "detectionRules": [
                    {"name": "cargo-toml", "type": "file_exists", "target": "Cargo.toml", "weight": 100},
                ],
            },
        ],
    },
    {
        "id": "go",
        "displayName": "Go",
        "aliases": ["golang"],
        "priority": 70,
        "detectionRules": [
            {"name": "go-mod", "type": "file_exists", "target": "go.mod", "weight": 100, "required": True},
            {"name": "go-sum", "type": "file_exists", "target": "go.sum", "weight": 20},
            {"name": "main-go", "type": "file_exists", "target": "main.go", "weight": 10},
        ],
        "packageManagers": [
            {
                "id": "go-modules",
                "displayName": "Go modules",
                "detectionRules": [
                    {"name": "go-mod", "type": "file_exists", "target": "go.mod", "weight": 100},
                ],
            },
        ],
    },
    {
        "id": "java",
        "displayName": "Java",
        "aliases": ["jvm", "kotlin"],
        "priority": 60,
        "detectionRules": [
            {"name": "pom-xml", "type": "file_exists", "target": "pom.xml", "weight": 100},
            {"name": "build-gradle", "type": "file_exists", "target": "build.gradle", "weight": 100},
            {"name": "build-gradle-kts", "type": "file_exists", "target": "build.gradle.kts", "weight": 100},
            {"name": "gradle-wrapper", "type": "file_exists", "target": "gradlew", "weight": 20},
            {"name": "java-sources", "type": "directory_exists", "target": "src/main/java", "weight": 20},
        ],
        "packageManagers": [
            {
                "id": "maven",
                "displayName": "Maven",
                "detectionRules": [
                    {"name": "pom-xml", "type": "file_exists", "target": "pom.xml", "weight": 100},
                    {"name": "maven-wrapper", "type": "file_exists", "target": "mvnw", "weight": 20},
                ],
            },
            {
                "id": "gradle",
                "displayName": "Gradle",
                "detectionRules": [
                    {"name": "build-gradle", "type": "file_exists", "target": "build.gradle", "weight": 100},
                    {"name": "build-gradle-kts", "type": "file_exists", "target": "build.gradle.kts", "weight": 100},
                    {"name": "gradle-wrapper", "type": "file_exists", "target": "gradlew", "weight": 30},
                ],
            },
        ],
    },
    {
        "id": "cpp",
        "displayName": "C/C++",
        "aliases": ["c", "c++"],
        "priority": 50,
        "detectionRules": [
            {"name": "cmake", "type": "file_exists", "target": "CMakeLists.txt", "weight": 100},
            {
                "name": "native-sources",
                "type": "custom",
                "target": "has_native_sources",
                "weight": 60,
                "config": {"customFunction": "has_native_sources"},
            },
            {"name": "makefile", "type": "file_exists", "target": "Makefile", "weight": 20},
        ],
    },
    {
        "id": "docker",
        "displayName": "Docker",
        "priority": 40,
        "detectionRules": [
            {"name": "dockerfile", "type": "file_exists", "target": "Dockerfile", "weight": 100},
            {"name": "compose-yml", "type": "file_exists", "target": "docker-compose.yml", "weight": 80},
            {"name": "compose-yaml", "type": "file_exists", "target": "docker-compose.yaml", "weight": 80},
            {"name": "compose-v2-yaml", "type": "file_exists", "target": "compose.yaml", "weight": 80},
            {"name": "dockerignore", "type": "file_exists", "target": ".dockerignore", "weight": 20},
        ],
    },
    {
        "id": "git",
        "displayName": "Git",
        "priority": 10,
        "detectionRules": [
            {"name": "git-dir", "type": "directory_exists", "target": ".git", "weight": 100, "required": True},
            # Worktrees and submodules carry a .git file instead of a directory.
            {"name": "git-file", "type": "file_exists", "target": ".git", "weight": 100, "required": True},
            {"name": "gitignore", "type": "file_exists", "target": ".gitignore", "weight": 10},
        ],
    },
]

BUILTIN_CATEGORIES: list[dict] = [
    {"id": "npm", "displayName": "NPM", "icon": "symbol-module", "supportedProjectTypes": ["nodejs"],
     "conditions": {"requiredPackageManager": "npm"}},
    {"id": "yarn", "displayName": "Yarn", "icon": "symbol-module", "supportedProjectTypes": ["nodejs"],
     "conditions": {"requiredPackageManager": "yarn"}},
    {"id": "pnpm", "displayName": "pnpm", "icon": "symbol-module", "supportedProjectTypes": ["nodejs"],
     "conditions": {"requiredPackageManager": "pnpm"}},
    {"id": "pip", "displayName": "Pip", "icon": "snake", "supportedProjectTypes": ["python"]},
    {"id": "poetry", "displayName": "Poetry", "icon": "snake", "supportedProjectTypes": ["python"],
     "conditions": {"requiredPackageManager": "poetry"}},
    {"id": "conda", "displayName": "Conda", "icon": "package", "supportedProjectTypes": ["python"],
     "conditions": {"requiredPackageManager": "conda"}},
    {"id": "rust", "displayName": "Rust", "icon": "symbol-structure", "supportedProjectTypes": ["rust"]},
    {"id": "go", "displayName": "Go", "icon": "symbol-structure", "supportedProjectTypes": ["go"]},
    {"id": "maven", "displayName": "Maven", "icon": "coffee", "supportedProjectTypes": ["java"],
     "conditions": {"requiredPackageManager": "maven"}},
    {"id": "gradle", "displayName": "Gradle", "icon": "coffee", "supportedProjectTypes": ["java"],
     "conditions": {"requiredPackageManager": "gradle"}},
    {"id": "docker", "displayName": "Docker", "icon": "symbol-namespace", "supportedProjectTypes": ["docker"],
     "conditions": {"requiresDocker": True}},
    {"id": "git", "displayName": "Git", "icon": "git-branch", "supportedProjectTypes": ["git"],
     "conditions": {"requiresGit": True}},
    {"id": "custom", "displayName": "Custom", "icon": "tools", "supportedProjectTypes": "*"},
]


def _commands(category: str, icon: str, entries: list[tuple[str, str, str]]) -> list[dict]:
    return [
        {"label": label, "command": command, "description": description, "category": category, "icon": icon}
        for label, command, description in entries
    ]


BUILTIN_COMMANDS: list[dict] = [
    *_commands("npm", "package", [
        ("Install Dependencies", "npm install", "Install all dependencies"),
        ("Clean Install", "npm ci", "Install exactly what package-lock.json pins"),
        ("Build Project", "npm run build", "Run the build script"),
        ("Test Project", "npm test", "Run the test script"),
        ("Check Outdated", "npm outdated", "List outdated packages"),
        ("Audit Security", "npm audit", "Run a security audit"),
    ]),
    *_commands("yarn", "package", [
        ("Yarn Install", "yarn install", "Install all dependencies"),
        ("Yarn Add Package", "yarn add package_name", "Add a dependency"),
        ("Yarn Build", "yarn build", "Run the build script"),
        ("Yarn Test", "yarn test", "Run the test script"),
    ]),
    *_commands("pnpm", "package", [
        ("pnpm Install", "pnpm install", "Install all dependencies"),
        ("pnpm Add Package", "pnpm add package_name", "Add a dependency"),
        ("pnpm Build", "pnpm run build", "Run the build script"),
        ("pnpm Test", "pnpm test", "Run the test script"),
    ]),
    *_commands("pip", "package", [
        ("Install Requirements", "pip install -r requirements.txt", "Install packages from requirements file"),
        ("Install Editable Package", "pip install -e .", "Install package in editable mode"),
        ("List Packages", "pip list", "List installed packages"),
        ("Freeze Requirements", "pip freeze > requirements.txt", "Export installed packages"),
        ("Check Dependencies", "pip check", "Check for dependency conflicts"),
    ]),
    *_commands("poetry", "package", [
        ("Poetry Install", "poetry install", "Install the locked dependency set"),
        ("Poetry Add Package", "poetry add package_name", "Add a dependency"),
        ("Poetry Lock", "poetry lock", "Refresh poetry.lock"),
        ("Poetry Shell", "poetry shell", "Spawn a shell inside the virtualenv"),
    ]),
    *_commands("conda", "package", [
        ("Create Environment", "conda env create -f environment.yml", "Create the environment from file"),
        ("Update Environment", "conda env update -f environment.yml --prune", "Sync the environment"),
        ("List Environments", "conda env list", "List conda environments"),
    ]),
    *_commands("rust", "tools", [
        ("Build Project", "cargo build", "Build the current project"),
        ("Run Project", "cargo run", "Run the current project"),
        ("Run Tests", "cargo test", "Run tests"),
        ("Check Code", "cargo check", "Check code without building"),
        ("Format Code", "cargo fmt", "Format Rust code"),
        ("Lint Code", "cargo clippy", "Run Clippy linter"),
    ]),
    *_commands("go", "tools", [
        ("Build", "go build ./...", "Build all packages"),
        ("Test", "go test ./...", "Run all tests"),
        ("Vet", "go vet ./...", "Report suspicious constructs"),
        ("Tidy Modules", "go mod tidy", "Prune and add module requirements"),
    ]),
    *_commands("maven", "tools", [
        ("Package", "mvn package", "Compile and package"),
        ("Test", "mvn test", "Run unit tests"),
        ("Clean Install", "mvn clean install", "Clean build and install locally"),
    ]),
    *_commands("gradle", "tools", [
        ("Build", "./gradlew build", "Assemble and test"),
        ("Test", "./gradlew test", "Run unit tests"),
        ("Tasks", "./gradlew tasks", "List available tasks"),
    ]),
    *_commands("docker", "symbol-namespace", [
        ("List Images", "docker images", "List local images"),
        ("List Containers", "docker ps -a", "List all containers"),
        ("Build Image", "docker build -t image_name .", "Build an image from the Dockerfile"),
        ("Compose Up", "docker compose up -d", "Start compose services in the background"),
        ("Compose Down", "docker compose down", "Stop compose services"),
    ]),
    *_commands("git", "git-branch", [
        ("Status", "git status", "Show working tree status"),
        ("Pull", "git pull", "Fetch and integrate remote changes"),
        ("Log", "git log --oneline -20", "Show recent history"),
        ("Stash", "git stash", "Stash local changes"),
    ]),
]

BUILTIN_DEPENDENCY_CHECKS: dict[str, dict] = {
    "docker": {"command": "docker --version", "description": "Docker CLI"},
    "yarn": {"command": "yarn --version", "description": "Yarn"},
    "pnpm": {"command": "pnpm --version", "description": "pnpm"},
    "poetry": {"command": "poetry --version", "description": "Poetry"},
    "conda": {"command": "conda --version", "description": "Conda"},
    "rust": {"command": "cargo --version", "description": "Cargo"},
    "go": {"command": "go version", "description": "Go toolchain"},
    "maven": {"command": "mvn --version", "description": "Maven"},
}

BUILTIN_CONFIG: dict = {
    "version": "1.0.0",
    "projectTypes": BUILTIN_PROJECT_TYPES,
    "categories": BUILTIN_CATEGORIES,
    "commands": BUILTIN_COMMANDS,
    "dependencyChecks": BUILTIN_DEPENDENCY_CHECKS,
}

# Used only when even the built-in config fails validation.
FALLBACK_CONFIG: dict = {
    "version": "1.0.0",
    "projectTypes": [
        {
            "id": "generic",
            "displayName": "Generic Project",
            "detectionRules": [{"name": "any-file", "type": "custom", "target": "*", "weight": 1}],
        },
    ],
    "categories": [
        {"id": "general", "displayName": "General", "icon": "gear", "supportedProjectTypes": "*"},
    ],
    "commands": [],
}

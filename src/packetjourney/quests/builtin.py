"""Built-in quests shipped with packetjourney."""

BUILTIN_QUESTS: list[dict] = [
    {
        "id": "tutorial-quest-001",
        "name": "Hello World",
        "description": "Your first journey through the stack! Learn the basics of how web requests work.",
        "difficulty": 1,
        "tags": ["tutorial", "beginner"],
        "layers": [
            {
                "type": "BROWSER",
                "order": 0,
                "challenge": {
                    "type": "SELECT_METHOD",
                    "config": {
                        "question": "What HTTP method should you use to fetch data?",
                        "options": ["GET", "POST", "PUT", "DELETE"],
                        "answer": "GET",
                        "explanation": "GET is used to retrieve data from a server.",
                    },
                },
            },
            {
                "type": "API",
                "order": 1,
                "challenge": {
                    "type": "PICK_ENDPOINT",
                    "config": {
                        "question": "Which endpoint returns a greeting?",
                        "options": ["/api/users", "/api/hello", "/api/admin"],
                        "answer": "/api/hello",
                        "explanation": "/api/hello is the route that answers with a greeting.",
                    },
                },
            },
            {
                "type": "DATABASE",
                "order": 2,
                "challenge": {
                    "type": "SELECT_QUERY",
                    "config": {
                        "question": "Select the query that fetches all users",
                        "options": [
                            "SELECT * FROM users",
                            "INSERT INTO users",
                            "DELETE FROM users",
                        ],
                        "answer": "SELECT * FROM users",
                        "explanation": "SELECT reads rows; * asks for every column.",
                    },
                },
            },
        ],
    },
    {
        "id": "auth-quest-001",
        "name": "Secure the Gate",
        "description": "Learn about authentication and secure API requests.",
        "difficulty": 3,
        "tags": ["authentication", "security", "intermediate"],
        "layers": [
            {
                "type": "BROWSER",
                "order": 0,
                "challenge": {
                    "type": "ADD_HEADERS",
                    "config": {
                        "requiredHeaders": ["Authorization"],
                        "headerHints": {
                            "Authorization": "Bearer token for authentication",
                        },
                        "explanation": "The Authorization header carries credentials, e.g. 'Bearer <token>'.",
                    },
                },
            },
            {
                "type": "API",
                "order": 1,
                "challenge": {
                    "type": "MIDDLEWARE_SEQUENCE",
                    "config": {
                        "steps": ["rate-limit", "validate-token", "check-permissions"],
                        "correctOrder": [1, 2, 0],
                        "explanation": (
                            "Validate the token first, then check permissions, then apply rate limiting."
                        ),
                    },
                },
            },
        ],
    },
    {
        "id": "api-quest-001",
        "name": "REST API Explorer",
        "description": (
            "Master the fundamentals of REST APIs - HTTP methods, status codes, headers, and CRUD operations."
        ),
        "difficulty": 2,
        "tags": ["api", "rest", "http", "intermediate"],
        "layers": [
            {
                "type": "BROWSER",
                "order": 0,
                "challenge": {
                    "type": "SELECT_METHOD",
                    "config": {
                        "question": "You want to create a new user account. Which HTTP method should you use?",
                        "options": ["GET", "POST", "PUT", "DELETE"],
                        "answer": "POST",
                        "explanation": (
                            "POST is used to create new resources on the server. "
                            "It sends data in the request body."
                        ),
                    },
                },
            },
            {
                "type": "API",
                "order": 1,
                "challenge": {
                    "type": "STATUS_CODE_MATCH",
                    "config": {
                        "scenario": "The user tried to access their profile without logging in first.",
                        "statusCodes": [200, 401, 403, 404],
                        "correctCode": 401,
                        "explanation": (
                            "401 Unauthorized means authentication is required. The user must log in first."
                        ),
                    },
                },
            },
            {
                "type": "DATABASE",
                "order": 2,
                "challenge": {
                    "type": "SELECT_QUERY",
                    "config": {
                        "question": "Select the query that inserts a new user",
                        "options": [
                            "SELECT * FROM users WHERE email = ?",
                            "INSERT INTO users (name, email) VALUES (?, ?)",
                            "UPDATE users SET name = ? WHERE id = ?",
                        ],
                        "answer": "INSERT INTO users (name, email) VALUES (?, ?)",
                        "explanation": "INSERT adds a new row; the placeholders keep the values parameterized.",
                    },
                },
            },
        ],
    },
    {
        "id": "api-quest-002",
        "name": "HTTP Status Code Master",
        "description": "Deep dive into HTTP status codes - learn what each code means and when to use them.",
        "difficulty": 4,
        "tags": ["api", "status-codes", "http", "advanced"],
        "layers": [
            {
                "type": "BROWSER",
                "order": 0,
                "challenge": {
                    "type": "ADD_HEADERS",
                    "config": {
                        "requiredHeaders": ["Content-Type", "Accept"],
                        "headerHints": {
                            "Content-Type": (
                                "Tells the server the format of the request body (e.g., application/json)"
                            ),
                            "Accept": "Tells the server what response formats the client can handle",
                        },
                    },
                },
            },
            {
                "type": "API",
                "order": 1,
                "challenge": {
                    "type": "STATUS_CODE_MATCH",
                    "config": {
                        "scenario": (
                            "The server successfully created a new resource and is returning its details."
                        ),
                        "statusCodes": [200, 201, 204, 301],
                        "correctCode": 201,
                        "explanation": (
                            "201 Created indicates a new resource was successfully created. "
                            "Often includes the new resource in the response."
                        ),
                    },
                },
            },
            {
                "type": "API",
                "order": 2,
                "challenge": {
                    "type": "STATUS_CODE_MATCH",
                    "config": {
                        "scenario": (
                            "The user is authenticated but does not have permission to delete this resource."
                        ),
                        "statusCodes": [400, 401, 403, 404],
                        "correctCode": 403,
                        "explanation": (
                            "403 Forbidden means the user is authenticated but lacks permission. "
                            "Unlike 401, logging in again won't help."
                        ),
                    },
                },
            },
            {
                "type": "API",
                "order": 3,
                "challenge": {
                    "type": "STATUS_CODE_MATCH",
                    "config": {
                        "scenario": "The server is overloaded and cannot handle the request right now.",
                        "statusCodes": [400, 500, 502, 503],
                        "correctCode": 503,
                        "explanation": (
                            "503 Service Unavailable indicates the server is temporarily overloaded "
                            "or under maintenance."
                        ),
                    },
                },
            },
            {
                "type": "DATABASE",
                "order": 4,
                "challenge": {
                    "type": "SELECT_QUERY",
                    "config": {
                        "question": "Which query checks if a user exists before inserting?",
                        "options": [
                            "SELECT COUNT(*) FROM users WHERE email = ?",
                            "DELETE FROM users WHERE email = ?",
                            "TRUNCATE TABLE users",
                        ],
                        "answer": "SELECT COUNT(*) FROM users WHERE email = ?",
                    },
                },
            },
        ],
    },
]

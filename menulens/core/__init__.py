# Core application infrastructure: errors, logging, session state, pipeline

"""Response renderers for raw data, text, streams, redirects, JSON, HTML templates, MessagePack, Protocol Buffers, TOML, XML and YAML."""
"""Pure text transforms: script extraction and shader reduction."""

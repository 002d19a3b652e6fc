"""Orders service: order models, order store and GraphQL and event handlers."""
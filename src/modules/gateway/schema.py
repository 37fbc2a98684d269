"""Operation schema published on ``GET /api/v1/graphql``.

Documentation for clients; requests are never validated against it.
"""

SCHEMA_SDL = """\
enum ShipmentStatus {
  pending
  picked_up
  in_transit
  out_for_delivery
  delivered
  delayed
  cancelled
}

enum ShipmentPriority {
  low
  medium
  high
  critical
}

enum ShipmentType {
  standard
  express
  overnight
  freight
  ltl
}

enum AppRole {
  admin
  employee
}

type Shipment {
  id: ID!
  trackingNumber: String!
  origin: String!
  destination: String!
  status: ShipmentStatus!
  carrier: String!
  weight: Float
  dimensions: String
  estimatedDelivery: String
  actualDelivery: String
  shipper: String
  consignee: String
  customerName: String
  customerEmail: String
  customerPhone: String
  priority: ShipmentPriority!
  type: ShipmentType!
  cost: Float
  notes: String
  createdBy: ID
  createdAt: String!
  updatedAt: String!
}

type Profile {
  id: ID!
  email: String
  fullName: String
  avatarUrl: String
  createdAt: String!
  updatedAt: String!
}

type UserRole {
  id: ID!
  userId: ID!
  role: AppRole!
  createdAt: String!
}

type PageInfo {
  hasNextPage: Boolean!
  hasPreviousPage: Boolean!
  totalCount: Int!
  totalPages: Int!
  currentPage: Int!
}

type ShipmentConnection {
  edges: [Shipment!]!
  pageInfo: PageInfo!
}

input ShipmentFilterInput {
  status: ShipmentStatus
  carrier: String
  priority: ShipmentPriority
  type: ShipmentType
  search: String
}

input ShipmentSortInput {
  field: String
  direction: String
}

input CreateShipmentInput {
  origin: String!
  destination: String!
  carrier: String!
  weight: Float
  dimensions: String
  estimatedDelivery: String
  shipper: String
  consignee: String
  customerName: String
  customerEmail: String
  customerPhone: String
  priority: ShipmentPriority
  type: ShipmentType
  cost: Float
  notes: String
}

input UpdateShipmentInput {
  origin: String
  destination: String
  status: ShipmentStatus
  carrier: String
  weight: Float
  dimensions: String
  estimatedDelivery: String
  actualDelivery: String
  shipper: String
  consignee: String
  customerName: String
  customerEmail: String
  customerPhone: String
  priority: ShipmentPriority
  type: ShipmentType
  cost: Float
  notes: String
}

type Query {
  shipments(filter: ShipmentFilterInput, sort: ShipmentSortInput, page: Int, limit: Int): ShipmentConnection!
  shipment(id: ID!): Shipment
  me: Profile
  myRole: UserRole
}

type Mutation {
  createShipment(input: CreateShipmentInput!): Shipment!
  updateShipment(id: ID!, input: UpdateShipmentInput!): Shipment!
  deleteShipment(id: ID!): Boolean!
}
"""
